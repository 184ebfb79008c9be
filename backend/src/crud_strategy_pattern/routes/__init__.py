"""
HTTP routes and the dependencies they share.

The app factory stores the settings and the 'SharedStore' on 'app.state'; the
dependencies below hand them to handlers so no route touches module globals.
"""

from fastapi import Request

from crud_toolkit.data_models import Account

from crud_strategy_pattern.settings import Settings
from crud_strategy_pattern.storage import SharedStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_accounts(request: Request) -> SharedStore[Account]:
    return request.app.state.accounts
