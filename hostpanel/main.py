from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from hostpanel.config import settings
from hostpanel.db.session import get_pool_status
from hostpanel.api.v1.api import api_router
from hostpanel.exceptions import (
    InvalidStatusTransition,
    ItemNotFound,
    ProtectedItem,
    ProvisioningError,
    UnknownItemKind,
)
from hostpanel.middleware.request_logging import RequestLoggingMiddleware
from hostpanel.middleware.metrics import PrometheusMiddleware, metrics_endpoint, set_app_info
from hostpanel.logging_config import setup_logging
from hostpanel.services.mutation import MutationHooks
from hostpanel.services.reconciliation import PluginSources

# ── Initialize structured logging ──
setup_logging()

app = FastAPI(
    title=settings.APP_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json"
)

# Extension points; plugins register their callbacks / item sources here at startup
app.state.mutation_hooks = MutationHooks()
app.state.plugin_sources = PluginSources()

# Set all CORS enabled origins
cors_origins = []
if settings.BACKEND_CORS_ORIGINS:
    cors_origins.extend([origin.strip() for origin in settings.BACKEND_CORS_ORIGINS.split(",") if origin.strip()])

if cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

# Request logging middleware: request ID, timing, acting account
app.add_middleware(RequestLoggingMiddleware)

# Prometheus metrics middleware: request count, latency, in-progress
app.add_middleware(PrometheusMiddleware)


# ── Domain errors -> HTTP ──

@app.exception_handler(ItemNotFound)
def item_not_found_handler(request: Request, exc: ItemNotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidStatusTransition)
def invalid_transition_handler(request: Request, exc: InvalidStatusTransition):
    return JSONResponse(
        status_code=409,
        content={"detail": str(exc), "current": exc.current, "target": exc.target},
    )


@app.exception_handler(ProtectedItem)
def protected_item_handler(request: Request, exc: ProtectedItem):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(UnknownItemKind)
def unknown_kind_handler(request: Request, exc: UnknownItemKind):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(ProvisioningError)
def provisioning_error_handler(request: Request, exc: ProvisioningError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


app.include_router(api_router, prefix=settings.API_V1_STR)

@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "env": settings.APP_ENV,
        "version": settings.APP_VERSION,
        "db_pool": get_pool_status(),
    }

# Prometheus metrics endpoint
app.add_route("/metrics", metrics_endpoint)
set_app_info(version=settings.APP_VERSION, env=settings.APP_ENV)
