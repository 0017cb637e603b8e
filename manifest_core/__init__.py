"""
Manifest core: IIIF presentation manifests with HTTP conditional caching
"""

from .version import __version__
