"""sim_user REST endpoints.

POST /users/register   — register a user (201)
POST /users/loan       — take a loan
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.sim_common.database import get_db_session
from src.sim_common.response import ApiResponse, success_response
from src.sim_user.application.schemas import LoanRequest, RegisterUserRequest
from src.sim_user.application.service import AccountApplicationService

router = APIRouter(prefix="/users", tags=["users"])

_service = AccountApplicationService()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register_user(
    body: RegisterUserRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.register(db, body.username, body.password, body.initial_balance)
    resp = success_response(data.model_dump(by_alias=True), "User registered successfully")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/loan")
async def take_loan(
    body: LoanRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.take_loan(db, body.user_id, body.amount)
    resp = success_response(
        data.model_dump(by_alias=True), f"Loan of {data.amount:.2f} processed successfully"
    )
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
