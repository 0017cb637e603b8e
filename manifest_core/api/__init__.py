"""
Manifest core REST API package

Use ``manifest_core.api:api.app`` as application for ASGI servers.
"""

from .api import api, create_app
