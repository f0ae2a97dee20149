"""Container-backed dependency providers."""

from fastapi import Depends, Request

from xrpfi.core.container import ApplicationContainer
from xrpfi.modules.executor import ExecutionOrchestrator
from xrpfi.modules.gateway import DestinationGateway
from xrpfi.modules.quotes import QuoteService, StrategyCatalog
from xrpfi.modules.transactions import TransactionLedger


def get_container(request: Request) -> ApplicationContainer:
    return request.app.state.container


def get_ledger(container: ApplicationContainer = Depends(get_container)) -> TransactionLedger:
    return container.ledger


def get_orchestrator(container: ApplicationContainer = Depends(get_container)) -> ExecutionOrchestrator:
    return container.orchestrator


def get_gateway(container: ApplicationContainer = Depends(get_container)) -> DestinationGateway:
    return container.gateway


def get_quote_service(container: ApplicationContainer = Depends(get_container)) -> QuoteService:
    return container.quotes


def get_strategy_catalog(container: ApplicationContainer = Depends(get_container)) -> StrategyCatalog:
    return container.catalog


__all__ = [
    "get_container",
    "get_ledger",
    "get_orchestrator",
    "get_gateway",
    "get_quote_service",
    "get_strategy_catalog",
]
