"""
Main API router that includes all endpoint routers.
"""
from fastapi import APIRouter

from wacontacts.api.v1.endpoints import contacts, imports


# Create main API router
api_router = APIRouter()

# Include all endpoint routers with appropriate tags
api_router.include_router(
    imports.router,
    prefix="/imports",
    tags=["Imports"]
)
api_router.include_router(
    contacts.router,
    prefix="/contacts",
    tags=["Contacts"]
)
