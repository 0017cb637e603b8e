"""
Manifest core version info
"""

__version__ = "0.1.0"
