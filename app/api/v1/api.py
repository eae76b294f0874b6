"""
V1 API router - aggregates all v1 endpoints.
"""
from fastapi import APIRouter
from app.api.v1.endpoints import listing_lifecycle

api_router = APIRouter()

# Include all v1 endpoints
api_router.include_router(listing_lifecycle.router, tags=["Listing Lifecycle"])
