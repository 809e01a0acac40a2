"""Tests for sim_common.errors and sim_common.response."""

from src.sim_common.errors import (
    AppError,
    BusinessRuleViolation,
    ConflictError,
    InsufficientFundsError,
    InsufficientHoldingsError,
    InvalidRequestError,
    LoanLimitExceededError,
    NotFoundError,
    PriceOutOfRangeError,
    StockExistsError,
    StockNotFoundError,
    StorageError,
    TradingSuspendedError,
    UserNotFoundError,
    UsernameExistsError,
    ValidationError,
)
from src.sim_common.response import ApiResponse, CamelModel, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_custom_http_status(self) -> None:
        err = AppError(code=1001, message="Username taken", http_status=409)
        assert err.http_status == 409

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1001, message="test"), Exception)


class TestSpecificErrors:
    def test_username_exists(self) -> None:
        err = UsernameExistsError("alice")
        assert isinstance(err, ConflictError)
        assert (err.code, err.http_status) == (1001, 409)
        assert "alice" in err.message

    def test_user_not_found(self) -> None:
        err = UserNotFoundError(42)
        assert isinstance(err, NotFoundError)
        assert (err.code, err.http_status) == (1002, 404)

    def test_loan_limit_message(self) -> None:
        err = LoanLimitExceededError(requested=5_000_000, current_loan=6_000_000, ceiling=10_000_000)
        assert isinstance(err, BusinessRuleViolation)
        assert (err.code, err.http_status) == (1004, 400)
        assert "Current loan: $60,000.00" in err.message
        assert "max allowed: $40,000.00" in err.message
        assert err.current_loan == 6_000_000

    def test_stock_errors(self) -> None:
        assert (StockExistsError("ACME").code, StockExistsError("ACME").http_status) == (3001, 409)
        assert (StockNotFoundError("X").code, StockNotFoundError("X").http_status) == (3002, 404)

    def test_price_out_of_range(self) -> None:
        err = PriceOutOfRangeError(15000)
        assert isinstance(err, ValidationError)
        assert (err.code, err.http_status) == (3003, 400)
        assert "$150.00" in err.message

    def test_insufficient_funds(self) -> None:
        err = InsufficientFundsError(required=50000, available=10000)
        assert (err.code, err.http_status) == (4002, 400)
        assert "$500.00" in err.message
        assert "$100.00" in err.message

    def test_insufficient_holdings(self) -> None:
        err = InsufficientHoldingsError(requested=6, held=5)
        assert (err.code, err.http_status) == (4004, 400)

    def test_trading_suspended_is_forbidden(self) -> None:
        err = TradingSuspendedError(balance=-600000, floor=-500000)
        assert (err.code, err.http_status) == (4005, 403)

    def test_invalid_request(self) -> None:
        err = InvalidRequestError("quantity: field required")
        assert (err.code, err.http_status) == (9001, 400)
        assert "quantity" in err.message

    def test_storage_error_is_generic(self) -> None:
        err = StorageError()
        assert (err.code, err.http_status) == (9002, 500)
        assert err.message == "Internal server error"


class TestApiResponse:
    def test_success(self) -> None:
        resp = success_response({"id": 1})
        assert resp.code == 0
        assert resp.message == "success"
        assert resp.data == {"id": 1}
        assert resp.request_id.startswith("req_")

    def test_error(self) -> None:
        resp = error_response(4002, "Insufficient funds")
        assert resp.code == 4002
        assert resp.data is None

    def test_serialization_keys(self) -> None:
        dumped = ApiResponse().model_dump()
        assert set(dumped) == {"code", "message", "data", "timestamp", "request_id"}


class _Payload(CamelModel):
    user_id: int
    new_balance: float


class TestCamelModel:
    def test_dumps_camel_case(self) -> None:
        assert _Payload(user_id=1, new_balance=2.5).model_dump(by_alias=True) == {
            "userId": 1,
            "newBalance": 2.5,
        }

    def test_accepts_both_spellings(self) -> None:
        assert _Payload.model_validate({"userId": 1, "newBalance": 0}).user_id == 1
        assert _Payload.model_validate({"user_id": 1, "new_balance": 0}).user_id == 1
