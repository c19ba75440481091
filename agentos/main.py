"""
AgentOS Commission API - FastAPI Application
"""
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from agentos.core.config import settings
from agentos.core.logger_config import setup_logging
from agentos.utils.responses import error_response

setup_logging()
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Sales agent commission API",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return error_response(str(exc.detail), status_code=exc.status_code)


# Global Exception Handler so unexpected errors keep the response envelope
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(
        "Internal Server Error",
        detail=str(exc) if settings.DEBUG else None,
        status_code=500
    )


# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - health check"""
    return {
        "ok": True,
        "message": f"Welcome to {settings.APP_NAME} API",
        "version": "1.0.0",
        "environment": settings.APP_ENV
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "environment": settings.APP_ENV,
        "firestore": settings.FIRESTORE_ENABLED
    }


# Import routers
from agentos.api import commissions

# Include routers
app.include_router(commissions.router, prefix="/api/commission", tags=["Commissions"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "agentos.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
