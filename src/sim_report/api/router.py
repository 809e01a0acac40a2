"""sim_report REST endpoints.

GET /users/report/{user_id}     — portfolio and P/L of one user
GET /users/top                  — top 10 users by net P/L
GET /stocks/report              — performance of every stock
GET /stocks/report/{symbol}     — performance of one stock
GET /stocks/top                 — top 10 stocks by traded value
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sim_common.database import get_db_session
from src.sim_common.response import ApiResponse, success_response
from src.sim_report.application.service import ReportService

router = APIRouter(tags=["reports"])

_service = ReportService()


def _respond(data: object, request: Request) -> ApiResponse:
    resp = success_response(data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/users/top")
async def get_top_users(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    items = await _service.top_users(db)
    return _respond([i.model_dump(by_alias=True) for i in items], request)


@router.get("/users/report/{user_id}")
async def get_user_report(
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    report = await _service.user_report(db, user_id)
    return _respond(report.model_dump(by_alias=True), request)


@router.get("/stocks/top")
async def get_top_stocks(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    items = await _service.top_stocks(db)
    return _respond([i.model_dump(by_alias=True) for i in items], request)


@router.get("/stocks/report")
@router.get("/stocks/report/{symbol}")
async def get_stock_report(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    symbol: str | None = None,
) -> ApiResponse:
    items = await _service.stock_report(db, symbol)
    return _respond([i.model_dump(by_alias=True) for i in items], request)
