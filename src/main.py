import os
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api import router
from src.autoscaler import AppSettings, AutoscalerService, ServiceConfig, load_service_configs
from src.log_handler.logging_config import setup_logging, get_logger, shutdown_logging

logger = get_logger(__name__)


# Global state management
class AppState:
    def __init__(self):
        self.autoscaler: Optional[AutoscalerService] = None
        self.is_shutting_down: bool = False


app_state = AppState()


def create_app(
    service_configs: Optional[List[ServiceConfig]] = None,
    settings: Optional[AppSettings] = None,
) -> FastAPI:
    """Creates and configures the FastAPI application"""
    settings = settings or AppSettings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Builds the autoscaler on startup and stops every loop on shutdown.
        """
        setup_logging(
            log_level=settings.log_level,
            log_file=settings.log_file,
            module_levels={
                "src.autoscaler.ticker": os.environ.get("TICKER_LOG_LEVEL", "INFO"),
            },
        )
        try:
            logger.info("Starting autoscaler services...")
            configs = service_configs
            if configs is None:
                configs = load_service_configs(settings.config_file)

            app_state.autoscaler = AutoscalerService(configs, history_size=settings.history_size)
            app_state.is_shutting_down = False
            await app_state.autoscaler.start()
            logger.info("Application startup complete")
            yield

            logger.info("Initiating graceful shutdown...")
            app_state.is_shutting_down = True
            await app_state.autoscaler.stop()
            logger.info("Application shutdown complete")
        except Exception as e:
            logger.error(f"Error during application lifecycle: {str(e)}")
            raise
        finally:
            app_state.autoscaler = None
            shutdown_logging()

    app = FastAPI(
        title="Utilization Autoscaler",
        description="Per-service instance count decisions from short and long utilization windows",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api/v1")
    return app


def run_app():
    """Runs the application with Uvicorn"""
    settings = AppSettings.from_env()
    try:
        app = create_app(settings=settings)

        config = uvicorn.Config(
            app=app,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            timeout_graceful_shutdown=30,
        )
        server = uvicorn.Server(config)
        server.run()
    except Exception as e:
        logger.error(f"Failed to start application: {str(e)}")
        raise


if __name__ == "__main__":
    run_app()
