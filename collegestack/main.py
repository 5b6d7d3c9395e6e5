from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from collegestack.core.config import settings
from collegestack.core.errors import CollegeStackError, collegestack_error_handler
from collegestack.db.init_db import create_all_tables, seed_database
from collegestack.middleware.request_logging import RequestLoggingMiddleware
from collegestack.middleware.auth_logging import AuthLoggingMiddleware
from collegestack.modules.auth.api.router import router as auth_router
from collegestack.modules.profiles.api.router import router as profiles_router
from collegestack.modules.posts.api.router import router as posts_router
from collegestack.modules.posts.comments.api.router import router as comments_router
from collegestack.modules.posts.votes.api.router import router as votes_router
from collegestack.modules.tags.api.router import router as tags_router
from collegestack.modules.feed.api.router import router as feed_router
from collegestack.modules.semester_view.api.router import router as semester_view_router
from collegestack.modules.moderation.api.router import router as moderation_router
from collegestack.modules.moderation.services.monitor import unanswered_monitor
from collegestack.modules.catalog.api.router import router as catalog_router
from collegestack.modules.media.router import router as media_router

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("app")

# Initialize the FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    exception_handlers={
        CollegeStackError: collegestack_error_handler,
    },
    debug=settings.DEBUG,
    description="Discussion forum for the college community",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    swagger_ui_parameters={"defaultModelsExpandDepth": -1},
)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting server in {settings.ENVIRONMENT} mode")
    logger.info(f"BASE_URL: {settings.BASE_URL}")

    create_all_tables()
    seed_database()
    if settings.UNANSWERED_MONITOR_ENABLED:
        unanswered_monitor.start()


@app.on_event("shutdown")
async def shutdown_event():
    await unanswered_monitor.stop()


# Add middleware
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(AuthLoggingMiddleware)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register API routers
app.include_router(auth_router, prefix=f"{settings.API_V1_STR}/auth", tags=["authentication"])
app.include_router(profiles_router, prefix=f"{settings.API_V1_STR}/profiles", tags=["profiles"])
app.include_router(posts_router, prefix=f"{settings.API_V1_STR}/posts", tags=["posts"])
app.include_router(comments_router, prefix=f"{settings.API_V1_STR}/posts/{{post_id}}/comments", tags=["comments"])
app.include_router(votes_router, prefix=f"{settings.API_V1_STR}/posts/{{post_id}}/vote", tags=["votes"])
app.include_router(tags_router, prefix=f"{settings.API_V1_STR}/tags", tags=["tags"])
app.include_router(feed_router, prefix=f"{settings.API_V1_STR}/feed", tags=["feed"])
app.include_router(semester_view_router, prefix=f"{settings.API_V1_STR}/semester-view", tags=["semester view"])
app.include_router(moderation_router, prefix=f"{settings.API_V1_STR}/moderation", tags=["moderation"])
app.include_router(catalog_router, prefix=f"{settings.API_V1_STR}/catalog", tags=["catalog"])
app.include_router(media_router)


@app.get("/")
async def root():
    return {
        "message": "Welcome to CollegeStack",
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "documentation": "/docs" if settings.DEBUG else None,
    }
