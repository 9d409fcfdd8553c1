from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema
import logging

from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
    LogoutSerializer,
)
from .services import (
    register_user,
    authenticate_user,
    issue_tokens,
    revoke_refresh_token,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    InvalidTokenError,
)

logger = logging.getLogger(__name__)


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()
    code = serializers.CharField()


def _auth_error(exc, http_status):
    return Response({
        'error': exc.friendly_message,
        'code': exc.code,
    }, status=http_status)


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: AuthResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Register a new store account and receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Sign up with email and password."""
    serializer = UserRegistrationSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    data = serializer.validated_data.copy()
    data.pop('password_confirm', None)

    try:
        user = register_user(**data)
    except UserRegistrationError as e:
        logger.warning("Registration rejected: %s", e)
        return _auth_error(e, status.HTTP_400_BAD_REQUEST)

    return Response({
        'message': 'Conta criada com sucesso.',
        'user': UserSerializer(user).data,
        'tokens': issue_tokens(user),
    }, status=status.HTTP_201_CREATED)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Sign in with email and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password'],
        )
    except InvalidCredentialsError as e:
        return _auth_error(e, status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError as e:
        return _auth_error(e, status.HTTP_403_FORBIDDEN)

    return Response({
        'message': 'Login realizado com sucesso.',
        'user': UserSerializer(user).data,
        'tokens': issue_tokens(user),
    })


@extend_schema(
    request=LogoutSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Sign out by blacklisting the refresh token.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Sign out and blacklist the refresh token."""
    refresh_token = request.data.get('refresh')
    if refresh_token:
        try:
            revoke_refresh_token(refresh_token=refresh_token)
        except InvalidTokenError as e:
            return _auth_error(e, status.HTTP_400_BAD_REQUEST)

    logger.info("User %s signed out", request.user.id)
    return Response({
        'message': 'Logout realizado com sucesso.'
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)
