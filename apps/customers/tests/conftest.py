import pytest
from rest_framework.test import APIClient
from apps.accounts.models import User
from apps.customers.models import Customer
from apps.customers.services import parse_sale_date

VALID_CPF = '52998224725'
OTHER_CPF = '11144477735'


def make_sale(sale_id, date, user_id=None, product='Suvinil Branco Neve', container_size='galao'):
    return {
        'id': sale_id,
        'user_id': str(user_id) if user_id else None,
        'product': product,
        'container_size': container_size,
        'observations': '',
        'date': date,
    }


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='vendedor@tintas.com.br',
        password='TestPass123!',
        display_name='Vendedor',
    )


@pytest.fixture
def other_user(db):
    """Create and return another test user."""
    return User.objects.create_user(
        email='gerente@tintas.com.br',
        password='OtherPass123!',
        display_name='Gerente',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client."""
    api_client.force_authenticate(user=user)
    return api_client


@pytest.fixture
def customer(db, user, other_user):
    """Customer with two sales: one by ``user`` (newest), one by ``other_user``."""
    sales = [
        make_sale('sale-new', '2024-03-10T15:00:00+00:00', user_id=user.id),
        make_sale('sale-old', '2024-01-05T10:30:00+00:00', user_id=other_user.id,
                  product='Coral Azul Sereno', container_size='lata'),
    ]
    return Customer.objects.create(
        cpf=VALID_CPF,
        name='Maria da Silva',
        phone='11987654321',
        sales=sales,
        last_purchase=parse_sale_date(sales[0]['date']),
        created_by=user,
    )


@pytest.fixture
def other_customer(db, other_user):
    """Customer with a single sale by ``other_user``."""
    sales = [
        make_sale('sale-joao', '2024-02-20T09:00:00+00:00', user_id=other_user.id,
                  product='Sherwin Verde Oliva', container_size='balde'),
    ]
    return Customer.objects.create(
        cpf=OTHER_CPF,
        name='João Pereira',
        phone='',
        sales=sales,
        last_purchase=parse_sale_date(sales[0]['date']),
        created_by=other_user,
    )
