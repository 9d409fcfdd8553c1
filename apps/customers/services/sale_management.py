"""Edit and delete operations on a customer's embedded sales."""

from django.core.exceptions import ValidationError
from django.db import transaction
from uuid import UUID
import logging

from ..models import Customer
from .customer_management import persist_customer_changes
from .exceptions import CustomerNotFoundError, SaleNotFoundError
from .reconciliation import find_sale, merge_sale_changes, replace_sale, remove_sale

logger = logging.getLogger(__name__)


def _lock_customer(customer_id: UUID) -> Customer:
    try:
        return Customer.objects.select_for_update().get(id=customer_id)
    except (Customer.DoesNotExist, ValidationError):
        raise CustomerNotFoundError(f"Customer {customer_id} not found")


@transaction.atomic
def update_sale(*, customer_id: UUID, sale_id: str, changes: dict) -> Customer:
    """
    Edit a sale in place, re-sort the history and recompute last purchase.

    Args:
        customer_id: Owner customer
        sale_id: Embedded sale id
        changes: Any of product, container_size, observations, date

    Returns:
        Updated Customer

    Raises:
        CustomerNotFoundError: If customer does not exist
        SaleNotFoundError: If the sale is not in the customer's history
        InvalidSaleError: If the changes are invalid
    """
    customer = _lock_customer(customer_id)

    current = find_sale(customer.sales, sale_id)
    if current is None:
        raise SaleNotFoundError(f"Sale {sale_id} not found for customer {customer_id}")

    updated_sale = merge_sale_changes(current, changes)
    sales, last_purchase = replace_sale(
        customer.sales,
        updated_sale,
        fallback=customer.last_purchase,
    )

    persist_customer_changes(customer, {
        'sales': sales,
        'last_purchase': last_purchase,
    })
    logger.info("Updated sale %s of customer %s", sale_id, customer.id)
    return customer


@transaction.atomic
def delete_sale(*, customer_id: UUID, sale_id: str) -> Customer:
    """
    Remove a sale from the customer's history.

    Deleting the last remaining sale keeps the previous last purchase.

    Raises:
        CustomerNotFoundError: If customer does not exist
        SaleNotFoundError: If the sale is not in the customer's history
    """
    customer = _lock_customer(customer_id)

    if find_sale(customer.sales, sale_id) is None:
        raise SaleNotFoundError(f"Sale {sale_id} not found for customer {customer_id}")

    sales, last_purchase = remove_sale(
        customer.sales,
        sale_id,
        previous_last_purchase=customer.last_purchase,
    )

    persist_customer_changes(customer, {
        'sales': sales,
        'last_purchase': last_purchase,
    })
    logger.info("Deleted sale %s of customer %s", sale_id, customer.id)
    return customer
