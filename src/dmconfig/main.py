"""FastAPI application for the device manager configuration backend."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uvicorn

from dmconfig.api.models import ErrorResponse
from dmconfig.api.routes import router
from dmconfig.models.errors import (
    ConfigError,
    ConfigValidationError,
    ErrorKind,
    RebootTriggerError,
)
from dmconfig.models.settings import Settings
from dmconfig.services.config_service import ConfigService
from dmconfig.services.device_schema import DeviceSchemaTransformer
from dmconfig.services.file_store import FileStore
from dmconfig.services.network_config import NetworkConfigService
from dmconfig.services.reboot import RebootTrigger
from dmconfig.utils.logging import setup_logger
from dmconfig.utils.validation import Validators

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PARSE: 500,
    ErrorKind.IO: 500,
}


async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
    """Map an error kind to an HTTP status with a traceback-free body."""
    logger = logging.getLogger("dmconfig.api")
    if exc.kind in (ErrorKind.VALIDATION, ErrorKind.NOT_FOUND):
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    else:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)

    message = exc.message
    if isinstance(exc, RebootTriggerError) and request.url.path.endswith("/network"):
        message = f"Network configuration saved, but reboot could not be triggered: {exc.message}"

    body = ErrorResponse(
        error=message,
        field=exc.field if isinstance(exc, ConfigValidationError) else None,
    )
    return JSONResponse(
        status_code=STATUS_BY_KIND[exc.kind],
        content=body.model_dump(exclude_none=True),
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Wire services by constructor injection and build the application.

    Args:
        settings: Deployment settings (read from DM_* environment if None)
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger = setup_logger(
            "dmconfig",
            settings.log_file,
            level=settings.log_level,
        )
        logger.info("DM config backend starting up...")
        if settings.reboot_test_mode:
            logger.warning("Reboot test mode enabled: reboot requests are only logged")
        logger.info(f"Managing {settings.devices_path}, {settings.properties_path}, {settings.devices_dir}")

        yield

        logger.info("DM config backend shutting down...")

    validators = Validators(settings.parity_values)
    reboot_trigger = RebootTrigger(settings.reboot_trigger_path, test_mode=settings.reboot_test_mode)

    app = FastAPI(
        title="DM Config",
        description="Configuration backend for the device manager appliance",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.config_service = ConfigService(
        settings, FileStore(), validators, DeviceSchemaTransformer()
    )
    app.state.network_service = NetworkConfigService(settings, validators, reboot_trigger)
    app.state.reboot_trigger = reboot_trigger

    app.add_exception_handler(ConfigError, config_error_handler)
    app.include_router(router)

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "dm-config", "version": "1.0.0"}

    return app


def main():
    """Main entry point for running the server."""
    settings = Settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level="info",
        access_log=True,
    )


if __name__ == "__main__":
    main()
