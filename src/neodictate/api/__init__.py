"""
neodictate - API Layer

HTTP interface to the endpoint registry.

Structure:
- routes/     : Endpoint handlers
- schemas/    : Pydantic schemas
- services/   : Protocol dispatcher between routes and registry
- middleware/ : Error handling
"""

from neodictate.api.main import create_app

__all__ = ["create_app"]
