"""Transaction status endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from xrpfi.interfaces.http.deps import get_ledger, get_orchestrator
from xrpfi.modules.executor import ExecutionOrchestrator
from xrpfi.modules.transactions import (
    InvalidStatusTransitionError,
    TransactionLedger,
    TransactionNotFoundError,
)
from xrpfi.schemas import TransactionListResponse, TransactionResponse

router = APIRouter()


def _to_schema(record) -> TransactionResponse:
    return TransactionResponse.model_validate(record)


@router.get("/address/{address}", response_model=TransactionListResponse, summary="List transactions for an XRPL address")
async def list_by_address(
    address: str,
    skip: int = 0,
    limit: int = 100,
    ledger: TransactionLedger = Depends(get_ledger),
):
    records = await ledger.list_by_address(address, limit=limit, offset=skip)
    return TransactionListResponse(address=address, transactions=[_to_schema(r) for r in records])


@router.get("/{source_tx_hash}", response_model=TransactionResponse, summary="Get transaction status")
async def get_status(source_tx_hash: str, ledger: TransactionLedger = Depends(get_ledger)):
    try:
        record = await ledger.get(source_tx_hash)
    except TransactionNotFoundError:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return _to_schema(record)


@router.post("/{source_tx_hash}/retry", response_model=TransactionResponse, summary="Retry a failed transaction")
async def retry(source_tx_hash: str, orchestrator: ExecutionOrchestrator = Depends(get_orchestrator)):
    try:
        record = await orchestrator.retry(source_tx_hash)
    except TransactionNotFoundError:
        raise HTTPException(status_code=404, detail="Transaction not found")
    except InvalidStatusTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return _to_schema(record)
