import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from sqlalchemy import text

from placement_coach.config import get_settings
from placement_coach.api import placements, results
from placement_coach.custom_logging import configure_logging
from placement_coach.exceptions import PlacementError
from placement_coach.services.gemini_service import get_gemini_service
from placement_coach.utils.response import create_response
import placement_coach.databases.postgres.model as models
from placement_coach.databases.postgres.database import engine

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    Placement test coaching: multi-stage company assessments, results and AI feedback.
    """,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Generate all table
models.Base.metadata.create_all(bind=engine)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

@app.exception_handler(PlacementError)
async def placement_exception_handler(request, exc: PlacementError):
    if exc.status_code >= 500:
        logging.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    else:
        logging.info(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=create_response(False, exc.detail, None, {"type": type(exc).__name__})
    )

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request, exc):
    return JSONResponse(
        status_code=400,
        content=create_response(False, "Request invalid", None, {"detail": jsonable_encoder(exc.errors())})
    )

@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content=create_response(False, exc.detail, None, None)
    )

app.include_router(placements.router, tags=["Placements"], prefix="/api/v1")
app.include_router(results.router, tags=["Results"], prefix="/api/v1")

@app.get("/")
async def root():
    return {"message": "Placement Coach Server running..."}

@app.get("/health", tags=["Health"])
async def health_check():
    """Health Check Endpoint"""
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return {
            "status": "healthy",
            "services": {
                "api": "up",
                "database": "up",
                "gemini": "configured" if get_gemini_service() else "fallback"
            },
        }
    except Exception as e:
        logging.error(f"Health check failed: {str(e)}")
        return {
            "status": "unhealthy",
            "error": str(e)
        }
