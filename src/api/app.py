"""FastAPI application exposing the RSS feed and the dashboard API."""
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Body, FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError

from src.app_settings.models import SettingUpdate
from src.record_store.errors import PersistenceError
from .container import ServiceContainer
from .schemas import (
    ArticleResponse,
    HealthResponse,
    LogEntryResponse,
    RefreshResponse,
    RssStatusResponse,
    ScrapeRunResponse,
    ServerInfoResponse,
    SettingResponse,
)


RSS_MEDIA_TYPE = "application/rss+xml; charset=utf-8"
RSS_CACHE_CONTROL = "public, max-age=300"


def _json(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


def create_app(container: ServiceContainer) -> FastAPI:
    """
    Build the application around a service container.

    The lifespan starts the container (store, seeded settings, scheduler)
    before serving and stops the scheduler on shutdown.

    Example:
        container = build_container(AppConfig.from_env())
        app = create_app(container)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Application startup")
        await container.startup()
        try:
            yield
        finally:
            await container.shutdown()
            logger.info("Application shutdown complete")

    app = FastAPI(title="UNIK Kediri RSS Feed", lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=container.config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(f"{request.method} {request.url.path} failed")
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.get("/rss.xml")
    async def rss_feed():
        document = await container.feed_generator.generate()
        return Response(
            content=document,
            media_type=RSS_MEDIA_TYPE,
            headers={"Cache-Control": RSS_CACHE_CONTROL},
        )

    @app.get("/api/status")
    async def status():
        rss_status = await container.status_service.get_rss_status()
        return _json(RssStatusResponse.model_validate(rss_status))

    @app.get("/api/articles")
    async def articles(limit: int = Query(default=20, ge=0)):
        records = await container.store.list_articles(limit)
        return [_json(ArticleResponse.model_validate(a)) for a in records]

    @app.get("/api/logs")
    async def logs(limit: int = Query(default=50, ge=0)):
        entries = await container.store.list_logs(limit)
        return [_json(LogEntryResponse.model_validate(e)) for e in entries]

    @app.get("/api/server-info")
    async def server_info():
        info = container.status_service.get_server_info()
        return _json(ServerInfoResponse.model_validate(info))

    @app.get("/api/settings")
    async def list_settings():
        settings = await container.settings_service.list_settings()
        return [_json(SettingResponse.model_validate(s)) for s in settings]

    @app.post("/api/settings")
    async def update_setting(payload: dict = Body(...)):
        try:
            update = SettingUpdate.model_validate(payload)
        except ValidationError as e:
            return JSONResponse(
                status_code=400,
                content={
                    "error": "Invalid setting data",
                    "details": [err["msg"] for err in e.errors()],
                },
            )

        setting = await container.settings_service.update_setting(
            update.key, update.value
        )
        return _json(SettingResponse.model_validate(setting))

    @app.post("/api/refresh")
    async def refresh():
        result = await container.scheduler.run_scrape_task()
        return _json(
            RefreshResponse(
                message="Refresh initiated successfully",
                result=ScrapeRunResponse.model_validate(result),
            )
        )

    @app.get("/api/health")
    async def health():
        return _json(
            HealthResponse(
                status="healthy",
                timestamp=datetime.now(timezone.utc),
                service="RSS Feed Generator",
            )
        )

    return app
