"""User registration service."""

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model
import logging

from .exceptions import UserRegistrationError, EmailAlreadyInUseError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = ""
) -> User:
    """
    Register a new store account.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name

    Returns:
        Created User instance

    Raises:
        EmailAlreadyInUseError: If the email is already registered
        UserRegistrationError: If registration fails
    """
    email = User.objects.normalize_email(email)
    if User.objects.filter(email__iexact=email).exists():
        raise EmailAlreadyInUseError(f"Email already registered: {email}")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name
        )
    except IntegrityError as e:
        raise UserRegistrationError(f"Registration failed: {str(e)}")

    logger.info("Registered user %s", user.id)
    return user
