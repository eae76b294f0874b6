"""
FastAPI application main entry point.
Serves the Listing Lifecycle Decision Engine.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.core.config import settings
from app.core.logging_config import configure_logging

# Import V1 API router
from app.api.v1.api import api_router as api_v1_router


configure_logging()

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Decides which listing actions (confirm, releaseEscrow, endSession) are legal now, and why not.",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (the marketplace frontend calls this directly)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include V1 API routes
app.include_router(api_v1_router, prefix="/v1")


@app.get("/")
async def root():
    """Service info."""
    return {
        "status": "operational",
        "service": settings.app_name,
        "version": settings.app_version,
        "default_chain": settings.default_chain,
        "endpoints": {
            "evaluate": "POST /v1/listings/lifecycle:evaluate",
            "inspect": "POST /v1/listings/lifecycle:inspect"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "service": settings.app_name}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
