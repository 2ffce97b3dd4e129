class BankError(Exception):
    """Base class for every error raised by the back-office core."""


class ValidationError(BankError, ValueError):
    """Raised when caller input is missing or malformed."""


class NotFoundError(BankError):
    """Raised when a referenced record is missing from the store."""


class CustomerNotFoundError(NotFoundError):
    """Raised when a customer id does not resolve."""


class AccountNotFoundError(NotFoundError):
    """Raised when an account number does not resolve."""


class DuplicateEmailError(BankError):
    """Raised when an email address is already registered to a customer."""


class BusinessRuleError(BankError):
    """Raised when a well-formed request breaks an account rule."""


class AlreadyClosedError(BusinessRuleError):
    """Raised when closing an account that is already closed."""


class NonZeroBalanceError(BusinessRuleError):
    """Raised when closing an account whose balance is not zero."""


class InactiveAccountError(BusinessRuleError):
    """Raised when moving money on an account that is not active."""


class InsufficientFundsError(BusinessRuleError):
    """Raised when a withdrawal would drop balance below zero."""


class GenerationError(BankError):
    """Raised when a unique account number cannot be allocated."""
