"""Customer CRUD operations service."""

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.contrib.auth import get_user_model
from django.utils import timezone
from uuid import UUID
import logging

from ..formatting import only_digits, CPF_LENGTH
from ..models import Customer
from .exceptions import CustomerNotFoundError, InvalidSaleError
from .reconciliation import build_sale, append_sale, parse_sale_date

User = get_user_model()
logger = logging.getLogger(__name__)


def persist_customer_changes(customer: Customer, changes: dict) -> Customer:
    """
    Write only ``changes`` to the customer's row, then apply them to the instance.

    The instance is left untouched when the UPDATE raises.
    """
    changes = {**changes, 'updated_at': timezone.now()}
    Customer.objects.filter(pk=customer.pk).update(**changes)
    for field, value in changes.items():
        setattr(customer, field, value)
    return customer


def get_customer_by_id(*, customer_id: UUID) -> Customer:
    """
    Raises:
        CustomerNotFoundError: If customer does not exist
    """
    try:
        return Customer.objects.select_related('created_by').get(id=customer_id)
    except (Customer.DoesNotExist, ValidationError):
        raise CustomerNotFoundError(f"Customer {customer_id} not found")


def get_customer_by_cpf(*, cpf: str) -> Customer:
    """
    Look a customer up by CPF, masked or not.

    Raises:
        CustomerNotFoundError: If no customer has that CPF
    """
    digits = only_digits(cpf)
    customer = (
        Customer.objects
        .select_related('created_by')
        .filter(cpf=digits)
        .first()
    ) if digits else None
    if customer is None:
        raise CustomerNotFoundError(f"No customer with CPF {digits or cpf!r}")
    return customer


def _find_customer_for_update(cpf: str):
    return Customer.objects.select_for_update().filter(cpf=cpf).first()


@transaction.atomic
def register_sale(
    *,
    user: User,
    customer_name: str,
    customer_cpf: str,
    product: str,
    container_size: str,
    customer_phone: str = '',
    observations: str = ''
) -> tuple[Customer, bool]:
    """
    Record a sale, creating the customer on first purchase.

    This operation:
    1. Builds the sale with a fresh id and the current timestamp
    2. Creates the customer when the CPF is new (creator = ``user``)
    3. Otherwise renames the customer, appends the sale, re-sorts the
       history and takes the newest date as last purchase. The phone is
       only overwritten when a new one is given.

    Args:
        user: Authenticated user, stored as the sale owner
        customer_name: Customer name from the form
        customer_cpf: CPF, masked or digits
        product: Product name
        container_size: lata, galao or balde
        customer_phone: Optional phone
        observations: Optional free text

    Returns:
        Tuple of (customer, created)

    Raises:
        InvalidSaleError: If the CPF or container size is invalid
    """
    cpf = only_digits(customer_cpf)
    if len(cpf) != CPF_LENGTH:
        raise InvalidSaleError(f"CPF must have {CPF_LENGTH} digits")

    sale = build_sale(
        user_id=user.id,
        product=product,
        container_size=container_size,
        observations=observations,
    )

    customer = _find_customer_for_update(cpf)

    if customer is None:
        try:
            with transaction.atomic():
                customer = Customer.objects.create(
                    cpf=cpf,
                    name=customer_name,
                    phone=customer_phone or '',
                    sales=[sale],
                    last_purchase=parse_sale_date(sale['date']),
                    created_by=user,
                )
        except IntegrityError:
            # A concurrent first sale created this CPF; append to it instead
            logger.info("Customer with CPF %s created concurrently, appending sale", cpf)
            customer = Customer.objects.select_for_update().get(cpf=cpf)
        else:
            logger.info("Created customer %s with first sale %s", customer.id, sale['id'])
            return customer, True

    sales, last_purchase = append_sale(customer.sales, sale)
    changes = {
        'name': customer_name,
        'sales': sales,
        'last_purchase': last_purchase,
    }
    if customer_phone:
        changes['phone'] = customer_phone

    persist_customer_changes(customer, changes)
    logger.info("Added sale %s to customer %s", sale['id'], customer.id)
    return customer, False


@transaction.atomic
def update_customer(*, customer_id: UUID, name: str, phone: str = '') -> Customer:
    """
    Edit a customer's name and phone. The CPF cannot be changed.

    An omitted phone clears the stored one.

    Raises:
        CustomerNotFoundError: If customer does not exist
    """
    try:
        customer = Customer.objects.select_for_update().get(id=customer_id)
    except (Customer.DoesNotExist, ValidationError):
        raise CustomerNotFoundError(f"Customer {customer_id} not found")

    persist_customer_changes(customer, {'name': name, 'phone': phone or ''})
    logger.info("Updated customer %s", customer.id)
    return customer
