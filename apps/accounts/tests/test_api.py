import pytest
from django.urls import reverse
from rest_framework import status
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken
from apps.accounts.models import User
from apps.accounts.services import AUTH_ERROR_MESSAGES


# =============================================================================
# Registration Tests
# =============================================================================

@pytest.mark.django_db
class TestRegistration:
    """Tests for POST /api/auth/register/"""

    def test_register_success(self, api_client):
        """Successfully register a new user."""
        url = reverse('users:register')
        data = {
            'email': 'novo@tintas.com.br',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
            'display_name': 'Novo Vendedor',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED
        assert 'access' in response.data['tokens']
        assert 'refresh' in response.data['tokens']
        assert User.objects.filter(email='novo@tintas.com.br').exists()

    def test_register_without_display_name(self, api_client):
        """Register without display name (optional field)."""
        url = reverse('users:register')
        data = {
            'email': 'minimo@tintas.com.br',
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_201_CREATED

    def test_register_duplicate_email_has_friendly_message(self, api_client, user):
        """Existing email is rejected with a localized message."""
        url = reverse('users:register')
        data = {
            'email': user.email,
            'password': 'SecurePass123!',
            'password_confirm': 'SecurePass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'email_in_use'
        assert response.data['error'] == AUTH_ERROR_MESSAGES['email_in_use']

    def test_register_password_mismatch(self, api_client):
        """Registration fails when passwords don't match."""
        url = reverse('users:register')
        data = {
            'email': 'diferente@tintas.com.br',
            'password': 'SecurePass123!',
            'password_confirm': 'DifferentPass123!',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'password_confirm' in response.data

    def test_register_weak_password(self, api_client):
        url = reverse('users:register')
        data = {
            'email': 'fraca@tintas.com.br',
            'password': '123',
            'password_confirm': '123',
        }
        response = api_client.post(url, data)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not User.objects.filter(email='fraca@tintas.com.br').exists()


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK
        assert 'access' in response.data['tokens']
        assert response.data['user']['email'] == user.email

    def test_login_wrong_password(self, api_client, user):
        """Wrong password maps to the invalid credentials message."""
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'WrongPassword123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == AUTH_ERROR_MESSAGES['invalid_credentials']

    def test_login_nonexistent_user(self, api_client):
        url = reverse('users:login')
        response = api_client.post(url, {'email': 'ninguem@tintas.com.br', 'password': 'SomePass123!'})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['code'] == 'invalid_credentials'

    def test_login_inactive_user(self, api_client, user_inactive):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user_inactive.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.data['code'] == 'inactive_account'

    def test_login_updates_last_login(self, api_client, user):
        url = reverse('users:login')
        response = api_client.post(url, {'email': user.email, 'password': 'TestPass123!'})

        assert response.status_code == status.HTTP_200_OK
        user.refresh_from_db()
        assert user.last_login is not None


# =============================================================================
# Logout Tests
# =============================================================================

@pytest.mark.django_db
class TestLogout:
    """Tests for POST /api/auth/logout/"""

    def test_logout_blacklists_refresh_token(self, authenticated_client, user_refresh_token):
        url = reverse('users:logout')
        response = authenticated_client.post(url, {'refresh': str(user_refresh_token)})

        assert response.status_code == status.HTTP_200_OK
        assert BlacklistedToken.objects.filter(token__jti=user_refresh_token['jti']).exists()

    def test_logout_twice_reports_invalid_token(self, authenticated_client, user_refresh_token):
        url = reverse('users:logout')
        authenticated_client.post(url, {'refresh': str(user_refresh_token)})
        response = authenticated_client.post(url, {'refresh': str(user_refresh_token)})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'invalid_token'

    def test_logout_without_refresh_token(self, authenticated_client):
        url = reverse('users:logout')
        response = authenticated_client.post(url, {})

        assert response.status_code == status.HTTP_200_OK

    def test_logout_unauthenticated(self, api_client):
        url = reverse('users:logout')
        response = api_client.post(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Current User Tests
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET /api/auth/user/"""

    def test_get_current_user(self, authenticated_client, user):
        url = reverse('users:current-user')
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == user.email
        assert response.data['display_name'] == 'Vendedor'

    def test_get_current_user_unauthenticated(self, api_client):
        url = reverse('users:current-user')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
