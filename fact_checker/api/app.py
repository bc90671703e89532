"""FastAPI application for the article fact-checking service."""

import contextlib
import logging
import math

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load environment variables from .env file
load_dotenv()

from ..domain.errors import AdmissionRejected, FactCheckError
from ..infrastructure.dependencies import get_service_container
from .endpoints import analyze, extract_article, health

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@contextlib.asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize providers on startup and release them on shutdown."""
    container = get_service_container()
    await container.startup()

    yield  # Application runs here

    await container.shutdown()


# Create FastAPI application
app = FastAPI(
    title="Article Fact Checker API",
    description="Claim extraction, evidence retrieval and verification for news articles",
    version="0.1.0",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_service_container().settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(extract_article.router)
app.include_router(analyze.router)


@app.exception_handler(AdmissionRejected)
async def admission_rejected_handler(request: Request, exc: AdmissionRejected) -> JSONResponse:
    logger.warning(f"🚦 Rate limit exceeded on {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.public_message, "remainingRequests": 0},
        headers={"Retry-After": str(max(1, math.ceil(exc.retry_after)))},
    )


@app.exception_handler(FactCheckError)
async def fact_check_error_handler(request: Request, exc: FactCheckError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"⚠️ Malformed request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"❌ Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": FactCheckError.public_message})
