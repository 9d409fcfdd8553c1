"""Domain-specific exceptions for accounts services."""


# Friendly messages shown to store staff, keyed by error code
AUTH_ERROR_MESSAGES = {
    'invalid_credentials': 'E-mail ou senha inválidos.',
    'inactive_account': 'Esta conta está desativada. Fale com o administrador.',
    'email_in_use': 'Este e-mail já está em uso por outra conta.',
    'registration_failed': 'Não foi possível criar a conta. Tente novamente.',
    'invalid_token': 'Sua sessão expirou. Entre novamente.',
}

DEFAULT_AUTH_MESSAGE = 'Ocorreu um erro de autenticação. Tente novamente.'


class AccountsServiceError(Exception):
    """Base exception for accounts services."""
    code = 'auth_error'

    @property
    def friendly_message(self):
        return AUTH_ERROR_MESSAGES.get(self.code, DEFAULT_AUTH_MESSAGE)


class UserRegistrationError(AccountsServiceError):
    """Raised when user registration fails."""
    code = 'registration_failed'


class EmailAlreadyInUseError(UserRegistrationError):
    """Raised when the email belongs to an existing account."""
    code = 'email_in_use'


class InvalidCredentialsError(AccountsServiceError):
    """Raised when authentication credentials are invalid."""
    code = 'invalid_credentials'


class InactiveAccountError(AccountsServiceError):
    """Raised when account is deactivated."""
    code = 'inactive_account'


class InvalidTokenError(AccountsServiceError):
    """Raised when a refresh token is invalid or already revoked."""
    code = 'invalid_token'
