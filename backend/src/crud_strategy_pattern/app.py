"""
FastAPI application factory.

'create_app' builds one store for the configured backend and keeps it, together
with its lock and the settings, on 'app.state' for the lifetime of the app.
Tests pass their own 'store' to run the routes against any 'Crud'
implementation.

Store failures never leak details to the client: any 'CrudError' is logged with
its cause and answered with a plain 500.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from crud_toolkit.crud import Crud, CrudError
from crud_toolkit.data_models import Account

from crud_strategy_pattern import __version__
from crud_strategy_pattern.routes.accounts import router as accounts_router
from crud_strategy_pattern.routes.index import router as index_router
from crud_strategy_pattern.settings import Settings
from crud_strategy_pattern.storage import SharedStore, build_store


async def _crud_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(f"[C]RUD failed on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def create_app(settings: Settings, store: Crud[Account] | None = None) -> FastAPI:
    if store is None:
        store = build_store(settings.backend, settings.resolved_storage_path(), Account)

    app = FastAPI(
        title="CRUD strategy pattern",
        description="Accounts served from a pluggable CSV or SQLite store.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.accounts = SharedStore(store)

    app.add_exception_handler(CrudError, _crud_error_handler)
    app.include_router(index_router, tags=["Pages"])
    app.include_router(accounts_router, tags=["Accounts"])
    return app
