"""sim_trading REST endpoints.

POST /users/buy    — buy shares at the current price
POST /users/sell   — sell held shares at the current price
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sim_common.database import get_db_session
from src.sim_common.response import ApiResponse, success_response
from src.sim_trading.application.schemas import TradeRequest
from src.sim_trading.application.service import TradingService

router = APIRouter(prefix="/users", tags=["trading"])

_service = TradingService()


@router.post("/buy")
async def buy_stock(
    body: TradeRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.buy(db, body.user_id, body.stock_symbol, body.quantity)
    resp = success_response(data.model_dump(by_alias=True), "Stock purchased successfully")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/sell")
async def sell_stock(
    body: TradeRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.sell(db, body.user_id, body.stock_symbol, body.quantity)
    resp = success_response(data.model_dump(by_alias=True), "Stock sold successfully")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
