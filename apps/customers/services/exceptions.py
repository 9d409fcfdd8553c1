"""Domain-specific exceptions for customers services."""


class CustomersServiceError(Exception):
    """Base exception for customers services."""
    pass


class CustomerNotFoundError(CustomersServiceError):
    """Raised when customer does not exist."""
    pass


class SaleNotFoundError(CustomersServiceError):
    """Raised when a sale id is not in the customer's history."""
    pass


class InvalidSaleError(CustomersServiceError):
    """Raised when sale data is inconsistent (e.g. unknown container size)."""
    pass


class CpfValidationUnavailableError(CustomersServiceError):
    """Raised when the CPF validation service cannot give an answer."""
    pass
