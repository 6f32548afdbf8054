import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from analytics.adapter.input.web.analytics_router import analytics_error_handler, analytics_router
from analytics.domain.analytics_error import AnalyticsError
from app.container import AnalyticsContainer, build_container
from config.database.session import init_db_schema
from config.logging_config import configure_logging

load_dotenv()
configure_logging()


def create_app(container: AnalyticsContainer | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Stored user keys live in the database; create the table when it is missing.
        if getattr(app.state.container.key_resolver, "repository", None) is not None:
            init_db_schema()
        try:
            yield
        finally:
            close = getattr(app.state.container.cache, "close", None)
            if close:
                await close()

    app = FastAPI(title="Video Analytics Server", version="0.1.0", lifespan=lifespan)
    app.state.container = container or build_container()

    origins_env = os.getenv("CORS_ORIGINS")
    origins = [origin for origin in origins_env.split(",") if origin] if origins_env else ["http://localhost:3000"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AnalyticsError, analytics_error_handler)
    app.include_router(analytics_router, prefix="/analytics")

    @app.get("/health")
    async def health_check() -> dict:
        """
        Liveness, cache connectivity and which platforms have a system key.
        """
        container = app.state.container
        sources = container.analyze_video_usecase.sources
        return {
            "status": "ok",
            "cache": await container.cache.stats(),
            "platforms": {name: source.is_enabled() for name, source in sources.items()},
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("APP_HOST", "0.0.0.0")
    port = int(os.getenv("APP_PORT", "8000"))
    uvicorn.run(app, host=host, port=port)
