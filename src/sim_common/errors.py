"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: User/Account
  3xxx: Stock
  4xxx: Trading
  9xxx: System

Categories map to HTTP status:
  ValidationError        400  bad input, never retried
  NotFoundError          404  user/stock absent
  ConflictError          409  duplicate unique key
  BusinessRuleViolation  400  ledger invariant would break (403 for suspension)
  StorageError           500  driver/database failure, message kept generic
"""

from src.sim_common.cents import cents_to_display


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class ValidationError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 400)


class NotFoundError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 404)


class ConflictError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 409)


class BusinessRuleViolation(AppError):
    def __init__(self, code: int, message: str, http_status: int = 400) -> None:
        super().__init__(code, message, http_status)


class StorageError(AppError):
    def __init__(self) -> None:
        super().__init__(9002, "Internal server error", 500)


# --- 1xxx: User/Account ---

class UsernameExistsError(ConflictError):
    def __init__(self, username: str) -> None:
        super().__init__(1001, f"User with username '{username}' already exists")


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: int) -> None:
        super().__init__(1002, f"User not found: {user_id}")


class InvalidAmountError(ValidationError):
    def __init__(self, amount: int) -> None:
        super().__init__(1003, f"Amount must be positive, got {cents_to_display(amount)}")


class LoanLimitExceededError(BusinessRuleViolation):
    def __init__(self, requested: int, current_loan: int, ceiling: int) -> None:
        remaining = max(ceiling - current_loan, 0)
        super().__init__(
            1004,
            f"Loan request ({cents_to_display(requested)}) exceeds maximum loan limit. "
            f"Current loan: {cents_to_display(current_loan)}, "
            f"max allowed: {cents_to_display(remaining)}",
        )
        self.current_loan = current_loan
        self.ceiling = ceiling


# --- 3xxx: Stock ---

class StockExistsError(ConflictError):
    def __init__(self, symbol: str) -> None:
        super().__init__(3001, f"Stock with symbol '{symbol}' already exists")


class StockNotFoundError(NotFoundError):
    def __init__(self, symbol: str) -> None:
        super().__init__(3002, f"Stock not found: {symbol}")


class PriceOutOfRangeError(ValidationError):
    def __init__(self, price: int) -> None:
        super().__init__(
            3003, f"Price must be between $1.00 and $100.00, got {cents_to_display(price)}"
        )


# --- 4xxx: Trading ---

class InvalidQuantityError(ValidationError):
    def __init__(self, quantity: int) -> None:
        super().__init__(4001, f"Quantity must be a positive integer, got {quantity}")


class InsufficientFundsError(BusinessRuleViolation):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            4002,
            f"Insufficient funds: required {cents_to_display(required)}, "
            f"available {cents_to_display(available)}",
        )


class InsufficientInventoryError(BusinessRuleViolation):
    def __init__(self, requested: int, available: int) -> None:
        super().__init__(
            4003,
            f"Insufficient inventory: requested {requested} shares, available {available}",
        )


class InsufficientHoldingsError(BusinessRuleViolation):
    def __init__(self, requested: int, held: int) -> None:
        super().__init__(
            4004,
            f"Insufficient holdings: requested {requested} shares, held {held}",
        )


class TradingSuspendedError(BusinessRuleViolation):
    def __init__(self, balance: int, floor: int) -> None:
        super().__init__(
            4005,
            f"Trading suspended: balance {cents_to_display(balance)} "
            f"is below {cents_to_display(floor)}",
            http_status=403,
        )


# --- 9xxx: System ---

class InvalidRequestError(ValidationError):
    def __init__(self, detail: str) -> None:
        super().__init__(9001, f"Invalid request: {detail}")
