"""Router aggregation: every feature router is mounted under ``/api``."""

from fastapi import FastAPI

from . import budget, categories, migrate, settings, transactions

API_PREFIX = "/api"


def register_routers(app: FastAPI) -> None:
    """Attach all API routes to the FastAPI application."""

    app.include_router(categories.router, prefix=API_PREFIX)
    app.include_router(transactions.router, prefix=API_PREFIX)
    app.include_router(settings.router, prefix=API_PREFIX)
    app.include_router(migrate.router, prefix=API_PREFIX)
    app.include_router(budget.router, prefix=API_PREFIX)
