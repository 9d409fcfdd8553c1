"""Services for accounts business logic."""

from .exceptions import (
    AUTH_ERROR_MESSAGES,
    AccountsServiceError,
    UserRegistrationError,
    EmailAlreadyInUseError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user, issue_tokens, revoke_refresh_token

__all__ = [
    # Exceptions
    'AUTH_ERROR_MESSAGES',
    'AccountsServiceError',
    'UserRegistrationError',
    'EmailAlreadyInUseError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'InvalidTokenError',
    # Services
    'register_user',
    'authenticate_user',
    'issue_tokens',
    'revoke_refresh_token',
]
