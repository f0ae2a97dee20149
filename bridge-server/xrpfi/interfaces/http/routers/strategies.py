"""Strategy catalog endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from xrpfi.interfaces.http.deps import get_strategy_catalog
from xrpfi.modules.quotes import StrategyCatalog, StrategyNotFoundError
from xrpfi.schemas import StrategyListResponse, StrategyResponse

router = APIRouter()


@router.get("", response_model=StrategyListResponse, summary="List strategies")
async def list_strategies(catalog: StrategyCatalog = Depends(get_strategy_catalog)):
    return StrategyListResponse(
        strategies=[StrategyResponse.model_validate(s) for s in catalog.list_strategies()]
    )


@router.get("/{strategy_id}", response_model=StrategyResponse, summary="Get strategy details")
async def get_strategy(strategy_id: str, catalog: StrategyCatalog = Depends(get_strategy_catalog)):
    try:
        strategy = catalog.get_strategy(strategy_id)
    except StrategyNotFoundError:
        raise HTTPException(status_code=404, detail="Strategy not found")
    return StrategyResponse.model_validate(strategy)
