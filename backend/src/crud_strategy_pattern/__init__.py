"""
HTTP demo server for the strategy pattern applied to persistence.

Accounts are served from whichever 'Crud' backend the settings select (CSV file
or SQLite); the routes are written against the interface only.
"""

APP_NAME = "crud-strategy-pattern"
ENV_PREFIX = "CRUD_STRATEGY_"

__version__ = "1.0.0"
