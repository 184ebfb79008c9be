"""
Account routes.

HTML listing under '/accounts', JSON CRUD under '/api/accounts'. Every handler
holds the store lock for its whole store access. Store failures propagate as
'CrudError' and are turned into a bare 500 by the handler registered in
'create_app'.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Response
from fastapi.responses import HTMLResponse
from loguru import logger
from pydantic import BaseModel

from crud_toolkit.data_models import Account, Fullname

from crud_strategy_pattern import __version__
from crud_strategy_pattern.rendering import render_page, render_records
from crud_strategy_pattern.routes import get_accounts, get_settings
from crud_strategy_pattern.settings import Settings
from crud_strategy_pattern.storage import SharedStore

router = APIRouter()


class AccountUpdate(BaseModel):
    fullname: Fullname


@router.get("/accounts", response_class=HTMLResponse)
def list_accounts_page(
    settings: Settings = Depends(get_settings),
    accounts: SharedStore[Account] = Depends(get_accounts),
) -> HTMLResponse:
    with accounts.acquire() as store:
        records = store.read_all()
    body = render_records(records)
    return HTMLResponse(render_page("Accounts", body, version=__version__, backend=settings.backend))


@router.get("/api/accounts")
def list_accounts(accounts: SharedStore[Account] = Depends(get_accounts)) -> list[Account]:
    with accounts.acquire() as store:
        return store.read_all()


@router.post("/api/accounts")
def create_account(account: Account, accounts: SharedStore[Account] = Depends(get_accounts)) -> Account:
    """Store the posted account. The id is generated when the body omits it."""
    with accounts.acquire() as store:
        store.create(account)
    logger.info(f"Created account id='{account.id}'")
    return account


@router.put("/api/accounts/{account_id}")
def update_account(
    account_id: UUID,
    update: AccountUpdate,
    accounts: SharedStore[Account] = Depends(get_accounts),
) -> Account:
    account = Account(id=account_id, fullname=update.fullname)
    with accounts.acquire() as store:
        store.update(account)
    return account


@router.delete("/api/accounts/{account_id}", status_code=204)
def delete_account(account_id: UUID, accounts: SharedStore[Account] = Depends(get_accounts)) -> Response:
    with accounts.acquire() as store:
        store.delete(Account(id=account_id, fullname=""))
    return Response(status_code=204)
