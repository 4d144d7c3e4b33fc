"""
Project Chat Server - FastAPI Wrapper for the Project Chat Service

Provides REST API endpoints for asking questions about a project's bids.
"""

import logging
import os
import threading
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .chat import ChatRequest, ChatResponse, ProjectChatService, build_service, validate_request
from .config import load_settings
from .errors import ProjectChatError

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Project Bid Assistant",
    description="Conversational assistant for construction bid coordination",
    version=__version__
)

# Browser clients call the API from other origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Built on first use so configuration errors surface per request
_SERVICE: Optional[ProjectChatService] = None
_SERVICE_LOCK = threading.Lock()


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    version: str


def get_chat_service() -> ProjectChatService:
    """
    Return the shared chat service, building it from the environment once.

    Raises:
        ConfigurationError: If required settings are missing
    """
    global _SERVICE
    with _SERVICE_LOCK:
        if _SERVICE is None:
            _SERVICE = build_service(load_settings())
            logger.info("Project chat service ready")
        return _SERVICE


@app.exception_handler(ProjectChatError)
async def project_chat_error_handler(request: Request, exc: ProjectChatError):
    if exc.status_code >= 500:
        logger.error(f"{request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    logger.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid request: {location} {first.get('msg', '')}".strip()
    logger.info(f"{request.url.path} rejected (400): {message}")
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.

    Returns:
        Service status and version
    """
    return HealthResponse(status="healthy", version=__version__)


@app.post("/project-chat", response_model=ChatResponse)
def project_chat(request: ChatRequest):
    """
    Answer a question about a project.

    Args:
        request: project_id, message and optional conversation_history

    Returns:
        Reply text, proposed changes and has_changes flag
    """
    validate_request(request)
    service = get_chat_service()
    return service.handle(request)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        log_level=os.getenv("LOG_LEVEL", "INFO").lower()
    )
