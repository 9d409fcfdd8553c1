"""Customer search and sale history queries."""

from django.db.models import Q, QuerySet
from typing import Optional

from ..formatting import only_digits
from ..models import Customer
from .reconciliation import parse_sale_date


def search_customers(*, search: Optional[str] = None) -> QuerySet[Customer]:
    """
    List customers, most recent buyer first.

    Args:
        search: Matches the name (case-insensitive substring) or, using
            only the digits of the term, the CPF (substring)

    Returns:
        Filtered QuerySet of Customer
    """
    queryset = Customer.objects.select_related('created_by').order_by('-last_purchase', '-created_at')

    if search:
        term = search.strip()
        criteria = Q(name__icontains=term)
        digits = only_digits(term)
        if digits:
            criteria |= Q(cpf__contains=digits)
        queryset = queryset.filter(criteria)

    return queryset


def list_sales(
    *,
    owner_id=None,
    customer_cpf: Optional[str] = None
) -> list[dict]:
    """
    Flatten every customer's sales into a single history.

    Each row carries the sale fields plus ``customer_id``,
    ``customer_name``, ``customer_cpf`` and ``customer_phone``.

    Args:
        owner_id: Only sales recorded by this user
        customer_cpf: Only sales of this customer (masked or digits)

    Returns:
        Sales ordered by date, most recent first
    """
    queryset = Customer.objects.all()
    if customer_cpf is not None:
        queryset = queryset.filter(cpf=only_digits(customer_cpf))

    owner = str(owner_id) if owner_id else None
    rows = []
    for customer in queryset.only('id', 'cpf', 'name', 'phone', 'sales'):
        for sale in customer.sales or []:
            if owner and sale.get('user_id') != owner:
                continue
            rows.append({
                **sale,
                'customer_id': customer.id,
                'customer_name': customer.name,
                'customer_cpf': customer.cpf,
                'customer_phone': customer.phone,
            })

    rows.sort(key=lambda row: parse_sale_date(row['date']), reverse=True)
    return rows
