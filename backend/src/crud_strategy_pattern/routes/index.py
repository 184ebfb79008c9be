from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from crud_toolkit.data_models import Account

from crud_strategy_pattern import __version__
from crud_strategy_pattern.rendering import render_page, render_records
from crud_strategy_pattern.routes import get_accounts, get_settings
from crud_strategy_pattern.settings import Settings
from crud_strategy_pattern.storage import SharedStore

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def index(
    settings: Settings = Depends(get_settings),
    accounts: SharedStore[Account] = Depends(get_accounts),
) -> HTMLResponse:
    with accounts.acquire() as store:
        records = store.read_all()
    body = render_records(records)
    return HTMLResponse(render_page("Index Page", body, version=__version__, backend=settings.backend))


@router.get("/health")
def health(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    return {"status": "ok", "version": __version__, "backend": settings.backend}
