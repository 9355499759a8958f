"""
LED Ring Controller - API Layer

REST interface over the services in services/.

Structure:
- routes/     : Endpoint handlers
- schemas/    : Pydantic request/response models
- middleware/ : Error handling, trigger authentication
"""

from api.main import create_app

__all__ = ["create_app"]
