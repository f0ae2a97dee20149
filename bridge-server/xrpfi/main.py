import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from xrpfi import __version__
from xrpfi.core.config import Settings, get_settings
from xrpfi.core.container import ApplicationContainer
from xrpfi.interfaces.http.routers import create_api_router
from xrpfi.schemas import HealthResponse

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=settings.log_level.upper(), format=LOG_FORMAT)


def create_app(
    settings: Optional[Settings] = None,
    container: Optional[ApplicationContainer] = None,
) -> FastAPI:
    settings = settings or (container.settings if container else get_settings())
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "container", None) is None:
            app.state.container = ApplicationContainer(settings)
        await app.state.container.start()
        try:
            yield
        finally:
            await app.state.container.stop()

    app = FastAPI(
        title=settings.project_name,
        description="XRPL to Flare yield bridge",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_api_router(settings.api_prefix))

    @app.get("/", response_model=HealthResponse)
    async def health():
        return HealthResponse(name=settings.project_name, version=__version__)

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "xrpfi.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.server.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
