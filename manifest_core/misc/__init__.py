"""
Manifest core collaborators and helpers that are not part of the REST API itself
"""
