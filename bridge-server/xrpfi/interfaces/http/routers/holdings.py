"""Holdings and vault status endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from xrpfi.core.container import ApplicationContainer
from xrpfi.interfaces.http.deps import get_container, get_gateway
from xrpfi.modules.addresses import InvalidXrplAddressError, derive_destination_address
from xrpfi.modules.chain import ChainError
from xrpfi.modules.gateway import DestinationGateway, GatewayConfigurationError, VaultStatus
from xrpfi.schemas import (
    HoldingsResponse,
    VaultListResponse,
    VaultPositionResponse,
    VaultStatusResponse,
    format_amount,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _vault_schema(container: ApplicationContainer, status: VaultStatus) -> VaultStatusResponse:
    return VaultStatusResponse(
        id=status.vault_key,
        name=container.settings.vaults[status.vault_key].name,
        address=status.address,
        asset=status.asset,
        total_assets=format_amount(status.total_assets),
        total_supply=format_amount(status.total_supply),
        exchange_rate=format_amount(status.exchange_rate),
    )


@router.get("/vaults", response_model=VaultListResponse, summary="Status of every configured vault")
async def list_vaults(
    container: ApplicationContainer = Depends(get_container),
    gateway: DestinationGateway = Depends(get_gateway),
):
    vaults = []
    for vault_key in gateway.vault_keys():
        if not gateway.vault_configured(vault_key):
            continue
        try:
            status = await gateway.get_vault_status(vault_key)
        except Exception as exc:
            logger.warning("Could not read %s vault status: %s", vault_key, exc)
            continue
        vaults.append(_vault_schema(container, status))
    return VaultListResponse(vaults=vaults)


@router.get("/vault/{vault_key}", response_model=VaultStatusResponse, summary="Status of one vault")
async def get_vault(
    vault_key: str,
    container: ApplicationContainer = Depends(get_container),
    gateway: DestinationGateway = Depends(get_gateway),
):
    try:
        status = await gateway.get_vault_status(vault_key)
    except GatewayConfigurationError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ChainError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return _vault_schema(container, status)


@router.get("/{xrpl_address}", response_model=HoldingsResponse, summary="Holdings for an XRPL address")
async def get_holdings(
    xrpl_address: str,
    container: ApplicationContainer = Depends(get_container),
    gateway: DestinationGateway = Depends(get_gateway),
):
    try:
        destination = derive_destination_address(xrpl_address)
    except InvalidXrplAddressError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    holdings = await gateway.get_holdings(destination)
    return HoldingsResponse(
        xrpl_address=xrpl_address,
        destination_address=destination,
        asset_symbol=container.settings.assets.symbol,
        asset_balance=format_amount(holdings.asset_balance),
        positions={
            key: VaultPositionResponse(
                shares=format_amount(position.shares),
                assets_value=format_amount(position.assets_value),
                exchange_rate=format_amount(position.exchange_rate),
            )
            for key, position in holdings.positions.items()
        },
        total_value=format_amount(holdings.total_value),
    )
