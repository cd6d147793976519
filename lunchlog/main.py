import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from lunchlog.config import settings
from lunchlog.core.completion import CompletionClient
from lunchlog.core.rate_limit import limiter
from lunchlog.database.supabase_client import Database
from lunchlog.modules.image_analysis.s3_storage import S3Storage
from lunchlog.modules.auth import routes as auth_routes
from lunchlog.modules.meals import routes as meals_routes
from lunchlog.modules.groups import routes as groups_routes
from lunchlog.modules.recommendations import routes as recommendations_routes
from lunchlog.modules.image_analysis import routes as image_analysis_routes
from lunchlog.modules.shopping_list import routes as shopping_list_routes
from lunchlog.modules.favorites import routes as favorites_routes
from lunchlog.modules.pantry import routes as pantry_routes
from lunchlog.modules.user_settings import routes as user_settings_routes
from lunchlog.modules.reports import routes as reports_routes
from lunchlog.modules.migration import routes as migration_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Populated by the startup hook; None means the backing service is unavailable
app.state.database = None
app.state.completion_client = None
app.state.object_storage = None


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    if settings.is_production:
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
    return JSONResponse(status_code=500, content={"detail": str(exc)})


class SecurityHeadersMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def send_with_headers(message):
            if message["type"] == "http.response.start":
                message.setdefault("headers", [])
                message["headers"].extend([
                    (b"X-Content-Type-Options", b"nosniff"),
                    (b"X-Frame-Options", b"DENY"),
                    (b"Referrer-Policy", b"no-referrer"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
app.include_router(auth_routes.router, prefix="/api/v1")
app.include_router(meals_routes.router, prefix="/api/v1")
app.include_router(groups_routes.router, prefix="/api/v1")
app.include_router(recommendations_routes.router, prefix="/api/v1")
app.include_router(image_analysis_routes.router, prefix="/api/v1")
app.include_router(shopping_list_routes.router, prefix="/api/v1")
app.include_router(favorites_routes.router, prefix="/api/v1")
app.include_router(pantry_routes.router, prefix="/api/v1")
app.include_router(user_settings_routes.router, prefix="/api/v1")
app.include_router(reports_routes.router, prefix="/api/v1")
app.include_router(migration_routes.router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info("Application startup")

    database = Database(settings)
    database.connect()
    app.state.database = database

    app.state.completion_client = CompletionClient(settings)

    try:
        app.state.object_storage = S3Storage(settings)
    except ValueError as e:
        logger.warning(f"Image storage disabled: {e}")
        app.state.object_storage = None


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")
    if app.state.completion_client is not None:
        app.state.completion_client.close()
        app.state.completion_client = None
    if app.state.database is not None:
        app.state.database.close()
        app.state.database = None
    app.state.object_storage = None


@app.get("/")
@limiter.exempt
async def root():
    return {"message": f"Welcome to {settings.app_name}", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready(request: Request):
    """Readiness check: 503 until the database client is up."""
    database = request.app.state.database
    if database is None or database.client is None:
        return JSONResponse(status_code=503, content={"status": "unavailable", "database": False})
    return {"status": "ready", "database": True}
