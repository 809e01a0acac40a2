from src.sim_common.errors import InvalidAmountError, LoanLimitExceededError


def check_loan_amount(amount: int) -> None:
    if amount <= 0:
        raise InvalidAmountError(amount)


def check_loan_limit(current_loan: int, amount: int, ceiling: int) -> None:
    """Raise LoanLimitExceededError if the new total loan would pass ``ceiling``."""
    if current_loan + amount > ceiling:
        raise LoanLimitExceededError(amount, current_loan, ceiling)
