"""sim_stock REST endpoints.

POST /stocks/register            — register a stock (201)
GET  /stocks/history             — price history of every stock
GET  /stocks/history/{symbol}    — price history of one stock
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.sim_common.database import get_db_session
from src.sim_common.response import ApiResponse, success_response
from src.sim_stock.application.schemas import RegisterStockRequest
from src.sim_stock.application.service import StockApplicationService

router = APIRouter(prefix="/stocks", tags=["stocks"])

_service = StockApplicationService()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register_stock(
    body: RegisterStockRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.register_stock(
        db, body.symbol, body.name, body.initial_price, body.available_quantity
    )
    resp = success_response(data.model_dump(by_alias=True), "Stock registered successfully")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/history")
@router.get("/history/{symbol}")
async def get_stock_history(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    symbol: str | None = None,
) -> ApiResponse:
    items = await _service.price_history(db, symbol)
    resp = success_response([item.model_dump(by_alias=True) for item in items])
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
