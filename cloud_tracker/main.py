import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from cloud_tracker.config import settings
from cloud_tracker.database.supabase_client import supabase_configured
from cloud_tracker.modules.auth import routes as auth_routes
from cloud_tracker.modules.applications import routes as applications_routes
from cloud_tracker.modules.deployments import routes as deployments_routes
from cloud_tracker.modules.environments import routes as environments_routes
from cloud_tracker.modules.providers import routes as providers_routes
from cloud_tracker.modules.tags import routes as tags_routes
from cloud_tracker.modules.todos import routes as todos_routes
from cloud_tracker.modules.notes import routes as notes_routes
from cloud_tracker.modules.maintenance import routes as maintenance_routes
from cloud_tracker.modules.sessions import routes as sessions_routes
from cloud_tracker.modules.user_settings import routes as user_settings_routes
from cloud_tracker.modules.github import routes as github_routes
from cloud_tracker.modules.stats import routes as stats_routes
from cloud_tracker.modules.sync import routes as sync_routes
from cloud_tracker.modules.auto_connect import routes as auto_connect_routes

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    redirect_slashes=False,
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


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
                    (b"X-XSS-Protection", b"1; mode=block"),
                ])
            await send(message)

        await self.app(scope, receive, send_with_headers)


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include module routes
for module in (
    auth_routes,
    applications_routes,
    deployments_routes,
    environments_routes,
    providers_routes,
    tags_routes,
    todos_routes,
    notes_routes,
    maintenance_routes,
    sessions_routes,
    user_settings_routes,
    github_routes,
    stats_routes,
    sync_routes,
    auto_connect_routes,
):
    app.include_router(module.router, prefix="/api/v1")
app.include_router(sessions_routes.external_router, prefix="/api/v1")


@app.on_event("startup")
async def startup_event():
    logger.info(f"{settings.app_name} startup ({settings.environment})")
    if not settings.claude_code_api_token:
        logger.warning("CLAUDE_CODE_API_TOKEN not set; /api/v1/external endpoints will reject every request")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Application shutdown")


@app.get("/")
async def root():
    return {"message": "Welcome to cloud-tracker", "status": "healthy"}


@app.get("/health")
@limiter.exempt
async def health():
    return {"status": "healthy"}


@app.get("/ready")
@limiter.exempt
async def ready():
    """Readiness probe: configuration needed to reach Supabase is present."""
    if not supabase_configured():
        return JSONResponse(status_code=503, content={"status": "not ready", "detail": "Supabase not configured"})
    return {"status": "ready"}
