"""Dependency container wiring the bridge components together."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncEngine
from xrpl.wallet import Wallet

from xrpfi.core.config import Settings, get_settings
from xrpfi.infrastructure.database import build_engine, build_session_factory, init_db
from xrpfi.modules.attestation import AttestationClient
from xrpfi.modules.chain import ChainClient
from xrpfi.modules.executor import ExecutionOrchestrator, ExecutionSupervisor
from xrpfi.modules.gateway import DestinationGateway
from xrpfi.modules.listener import PaymentListener
from xrpfi.modules.quotes import QuoteService, StrategyCatalog
from xrpfi.modules.transactions import TransactionLedger

logger = logging.getLogger(__name__)

RESTART_MESSAGE = "Interrupted by a service restart; retry to resume"


def resolve_operator_address(settings: Settings) -> Optional[str]:
    if settings.xrpl.operator_seed:
        return Wallet.from_seed(settings.xrpl.operator_seed).classic_address
    return settings.xrpl.operator_address


class ApplicationContainer:
    """Builds every long-lived component once; ``start``/``stop`` bracket the app lifetime."""

    def __init__(
        self,
        settings: Settings,
        *,
        engine: Optional[AsyncEngine] = None,
        chain: Optional[ChainClient] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.settings = settings
        self.engine = engine or build_engine(settings)
        self.session_factory = build_session_factory(self.engine)
        self.ledger = TransactionLedger(self.session_factory)

        self.chain = chain or ChainClient.from_settings(settings.flare)
        self.attestation = AttestationClient(settings.attestation, self.chain, http_client)
        self.gateway = DestinationGateway(self.chain, settings.assets)

        self.supervisor = ExecutionSupervisor(
            self._orchestrate,
            max_concurrency=settings.execution.max_concurrency,
        )
        self.orchestrator = ExecutionOrchestrator(
            self.ledger,
            self.attestation,
            self.gateway,
            dispatch=self.supervisor.submit,
        )

        self.operator_address = resolve_operator_address(settings)
        self.catalog = StrategyCatalog(settings.vaults)
        self.quotes = QuoteService(settings.quote, self.catalog, self.operator_address)

        self.listener: Optional[PaymentListener] = None
        if self.operator_address:
            self.listener = PaymentListener(
                settings.xrpl,
                self.operator_address,
                self.ledger,
                self.supervisor.submit,
            )

    async def _orchestrate(self, source_tx_hash: str) -> None:
        await self.orchestrator.process(source_tx_hash)

    async def start(self) -> None:
        await init_db(self.engine)
        interrupted = await self.ledger.fail_interrupted(RESTART_MESSAGE)
        if interrupted:
            logger.warning("%d transactions were interrupted by the last shutdown", len(interrupted))

        if self.listener is None:
            logger.warning("XRPL operator account not configured; payment listener disabled")
        elif self.settings.execution.listener_enabled:
            self.listener.start()
        logger.info("%s started (%s)", self.settings.project_name, self.settings.environment)

    async def stop(self) -> None:
        if self.listener is not None:
            await self.listener.stop()
        await self.supervisor.shutdown()
        await self.attestation.close()
        await self.chain.close()
        await self.engine.dispose()
        logger.info("%s stopped", self.settings.project_name)


def build_container(settings: Optional[Settings] = None) -> ApplicationContainer:
    return ApplicationContainer(settings or get_settings())


__all__ = ["ApplicationContainer", "RESTART_MESSAGE", "build_container", "resolve_operator_address"]
