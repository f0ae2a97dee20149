"""Operator account endpoint."""

import logging

from fastapi import APIRouter, Depends

from xrpfi.core.container import ApplicationContainer
from xrpfi.interfaces.http.deps import get_container
from xrpfi.schemas import OperatorResponse, format_amount

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=OperatorResponse, summary="Operator accounts and balances")
async def get_operator(container: ApplicationContainer = Depends(get_container)):
    response = OperatorResponse(
        xrpl_address=container.operator_address,
        asset_token_address=container.settings.assets.token_address,
    )
    if not container.chain.has_signer:
        return response

    try:
        balances = await container.gateway.get_operator_balances()
    except Exception as exc:
        logger.warning("Could not read operator balances: %s", exc)
        response.flare_address = container.chain.operator_address
        return response

    response.flare_address = balances.address
    response.flare_balance = format_amount(balances.native_balance)
    response.asset_balance = format_amount(balances.asset_balance)
    return response
