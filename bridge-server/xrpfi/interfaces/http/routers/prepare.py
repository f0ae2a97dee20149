"""Payment preparation endpoint."""

from fastapi import APIRouter, Depends, HTTPException

from xrpfi.interfaces.http.deps import get_quote_service
from xrpfi.modules.quotes import InvalidQuoteRequestError, OperatorNotConfiguredError, QuoteService
from xrpfi.schemas import (
    FeeEstimateResponse,
    PrepareRequest,
    PrepareResponse,
    StrategySummaryResponse,
    format_amount,
)

router = APIRouter()


@router.post("", response_model=PrepareResponse, summary="Prepare an instruction payment")
async def prepare(payload: PrepareRequest, quotes: QuoteService = Depends(get_quote_service)):
    try:
        quote = quotes.prepare(payload.source_address, payload.amount_xrp, payload.allocation)
    except InvalidQuoteRequestError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except OperatorNotConfiguredError as exc:
        raise HTTPException(status_code=503, detail=str(exc))

    return PrepareResponse(
        destination_address=quote.destination_address,
        memo=quote.memo,
        amount_drops=quote.amount_drops,
        lots=quote.lots,
        estimated_fees=FeeEstimateResponse(
            xrpl_fee=format_amount(quote.fees.xrpl_fee),
            minting_fee=format_amount(quote.fees.minting_fee),
            total=format_amount(quote.fees.total),
        ),
        strategy=StrategySummaryResponse(
            id=quote.strategy.id,
            name=quote.strategy.name,
            apy=quote.strategy.apy,
        ),
        allocation=quote.allocation,
    )
