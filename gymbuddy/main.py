"""
FastAPI application entry point for GymBuddy backend.

This module creates the FastAPI app instance, configures logging and CORS,
registers error handlers and all routers.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from gymbuddy.config import DEFAULT_DEV_CORS_ORIGINS, Settings, settings
from gymbuddy.routes.auth import router as auth_router
from gymbuddy.routes.friends import router as friends_router
from gymbuddy.routes.health import router as health_router
from gymbuddy.routes.notifications import router as notifications_router
from gymbuddy.routes.profile import router as profile_router
from gymbuddy.routes.recommendations import router as recommendations_router
from gymbuddy.routes.workouts import router as workouts_router
from gymbuddy.services.errors import RecommendationError
from gymbuddy.utils.logging import configure_logging

configure_logging(settings.LOG_LEVEL)

logger = logging.getLogger(__name__)


def _get_cors_origins(app_settings: Settings) -> list[str]:
    """
    Get allowed CORS origins based on environment.

    - ENVIRONMENT=production: CORS_ALLOWED_ORIGINS (none allowed if unset)
    - otherwise: the localhost / Expo origins used during development

    Native mobile builds don't send Origin headers, so CORS mainly affects
    the Expo web preview and browser clients.
    """
    if app_settings.is_production():
        origins = app_settings.CORS_ALLOWED_ORIGINS
        if origins:
            logger.info(f"CORS configured for production with {len(origins)} allowed origins")
        else:
            logger.warning(
                "CORS_ALLOWED_ORIGINS not set in production. "
                "No web origins allowed. Set CORS_ALLOWED_ORIGINS for web clients."
            )
        return list(origins)

    logger.info(f"CORS configured for {app_settings.ENVIRONMENT}: allowing development origins")
    return list(DEFAULT_DEV_CORS_ORIGINS)


# Create FastAPI app
app = FastAPI(
    title="GymBuddy API",
    description="Backend service for the GymBuddy fitness social app",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Log detailed validation errors for debugging and return them to the client.
    """
    logger.error(
        f"Validation error on {request.method} {request.url.path}: {exc.errors()}"
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "details": exc.errors(),
        }
    )


@app.exception_handler(RecommendationError)
async def recommendation_exception_handler(request: Request, exc: RecommendationError):
    """
    Render recommendation pipeline failures as {"error", "details"}.

    Malformed model output also carries raw_response.
    """
    logger.warning(
        f"Recommendation failed on {request.method} {request.url.path}: "
        f"{exc.error_code} ({exc.status_code})"
    )

    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(settings),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(friends_router)
app.include_router(workouts_router)
app.include_router(notifications_router)
app.include_router(recommendations_router)

logger.info("FastAPI app initialized successfully")
