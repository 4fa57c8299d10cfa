"""Container Gateway - FastAPI facade over the Docker engine."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
import time
import uuid

import docker
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from . import __version__, routers
from .config import Settings, get_settings
from .docker_ops import DockerClientWrapper
from .exceptions import ContainerGatewayError
from .logging_config import set_correlation_id, setup_logging
from .port_allocator import PortAllocator
from .provisioner import ContainerProvisioner

logger = structlog.get_logger()


def _build_provisioner(app: FastAPI) -> ContainerProvisioner:
    settings: Settings = app.state.settings
    return ContainerProvisioner(
        docker_client=app.state.docker,
        allocator=app.state.allocator,
        container_port=settings.container_port,
        command=[settings.container_command],
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    settings: Settings = app.state.settings
    setup_logging(
        service_name=settings.service_name,
        log_format=settings.log_format,
        log_level=settings.log_level,
    )

    owns_client = app.state.docker is None
    if owns_client:
        try:
            app.state.docker = DockerClientWrapper(max_workers=settings.docker_max_workers)
            app.state.provisioner = _build_provisioner(app)
        except docker.errors.DockerException as e:
            # Serve anyway; container routes report the runtime as unavailable
            logger.error("docker_unavailable", error=str(e))

    logger.info(
        "container_gateway_started",
        port_range_start=app.state.allocator.start,
        port_range_end=app.state.allocator.end,
    )
    yield

    if owns_client and app.state.docker is not None:
        app.state.docker.close()
    logger.info("container_gateway_stopped")


async def correlation_middleware(request: Request, call_next):
    correlation_id = request.headers.get("X-Correlation-ID", f"req_{uuid.uuid4().hex[:8]}")
    set_correlation_id(correlation_id)
    structlog.contextvars.bind_contextvars(method=request.method, path=request.url.path)

    start = time.time()

    try:
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000

        if response.status_code >= 500:  # noqa: PLR2004
            logger.error(
                "http_request_failed",
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )
        else:
            logger.info(
                "http_request", status_code=response.status_code, duration_ms=round(duration_ms, 2)
            )

        response.headers["X-Correlation-ID"] = correlation_id
        return response
    except Exception as e:
        duration_ms = (time.time() - start) * 1000
        logger.error(
            "http_request_exception",
            error=str(e),
            error_type=type(e).__name__,
            duration_ms=round(duration_ms, 2),
            exc_info=True,
        )
        raise
    finally:
        structlog.contextvars.unbind_contextvars("correlation_id", "method", "path")


async def gateway_error_handler(request: Request, exc: ContainerGatewayError) -> JSONResponse:
    logger.warning("request_failed", error=exc.message, error_type=type(exc).__name__)
    return JSONResponse(status_code=500, content={"error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(status_code=422, content={"error": message})


def create_app(
    docker_client: DockerClientWrapper | None = None,
    allocator: PortAllocator | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the application.

    When ``docker_client`` is omitted the lifespan connects to the engine from
    the environment (DOCKER_HOST or the local socket).
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Docker Orchestration API",
        description="API documentation for Docker Orchestration",
        version=__version__,
        docs_url="/api-docs",
        servers=[{"url": f"http://localhost:{settings.port}"}],
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.docker = docker_client
    app.state.allocator = allocator or PortAllocator(
        start=settings.port_range_start, end=settings.port_range_end
    )
    app.state.provisioner = _build_provisioner(app) if docker_client is not None else None

    app.middleware("http")(correlation_middleware)
    app.add_exception_handler(ContainerGatewayError, gateway_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(routers.health.router)
    app.include_router(routers.containers.router)

    return app


app = create_app()


def run() -> None:
    """Console entrypoint: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
