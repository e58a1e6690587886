import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI

from shortlink_app.api.error_handlers import register_error_handlers
from shortlink_app.api.v1 import links, redirect
from shortlink_app.config import Settings, settings
from shortlink_app.errors import PersistenceError
from shortlink_app.hit_processor.merge_worker import MetadataMerger
from shortlink_app.queue.factory import QueueBackend, QueueFactory
from shortlink_app.services.link_service import LinkService


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: load links, create the access queue, start the merge worker.
    Shutdown: stop the worker, merge what is left, save usage counters.
    """
    app_settings: Settings = app.state.settings

    link_service = LinkService.load(app_settings.link_data_path)
    access_queue = QueueFactory.create(QueueBackend(app_settings.queue_backend), app_settings)
    merger = MetadataMerger(link_service, access_queue, interval=app_settings.merge_interval_seconds)

    app.state.link_service = link_service
    app.state.access_queue = access_queue
    app.state.merger = merger

    merger_task = asyncio.create_task(merger.start())

    yield

    merger.stop()
    merger_task.cancel()
    try:
        await merger_task
    except asyncio.CancelledError:
        pass

    await merger.merge_once()
    try:
        await link_service.save()
    except PersistenceError as e:
        print(f"❌ Could not save usage data on shutdown: {e}")


def create_app(app_settings: Settings = settings) -> FastAPI:
    app = FastAPI(
        title=app_settings.app_name,
        version=app_settings.app_version,
        description="A short link service with usage tracking",
        debug=app_settings.debug,
        lifespan=lifespan
    )
    app.state.settings = app_settings

    @app.get("/")
    def read_root():
        """Root endpoint with API information"""
        return {
            "message": f"Welcome to {app_settings.app_name}",
            "version": app_settings.app_version,
            "docs": "/docs",
            "redoc": "/redoc"
        }

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {"status": "healthy", "environment": app_settings.environment}

    register_error_handlers(app)

    ######## Include routers
    app.include_router(links.router, prefix="/api/v1")
    app.include_router(redirect.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
