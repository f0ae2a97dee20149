"""Reusable FastAPI dependencies."""

from .container import (
    get_container,
    get_gateway,
    get_ledger,
    get_orchestrator,
    get_quote_service,
    get_strategy_catalog,
)

__all__ = [
    "get_container",
    "get_gateway",
    "get_ledger",
    "get_orchestrator",
    "get_quote_service",
    "get_strategy_catalog",
]
