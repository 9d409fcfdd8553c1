"""
Sale list reconciliation.

Pure functions that keep a customer's embedded sale list and its derived
``last_purchase`` consistent. Nothing here touches the database; callers
persist the returned values.

Every mutator returns a ``(sales, last_purchase)`` pair where ``sales`` is a
new list sorted most-recent-first and ``last_purchase`` is an aware datetime
(or the caller's fallback).
"""

from datetime import datetime, timezone as dt_timezone
from typing import Optional
import uuid

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from ..models import ContainerSize
from .exceptions import InvalidSaleError

EDITABLE_SALE_FIELDS = ('product', 'container_size', 'observations', 'date')


def parse_sale_date(value) -> datetime:
    """Return an aware datetime for an ISO string or datetime."""
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = parse_datetime(str(value))
        except ValueError:
            parsed = None
        if parsed is None:
            raise InvalidSaleError(f"Invalid sale date: {value!r}")
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def format_sale_date(value) -> str:
    return parse_sale_date(value).isoformat()


def build_sale(
    *,
    user_id,
    product: str,
    container_size: str,
    observations: str = '',
    date=None,
    sale_id: Optional[str] = None
) -> dict:
    """
    Build a new embedded sale.

    Generates the id and stamps the current time unless given.

    Raises:
        InvalidSaleError: If container size is not one of lata/galao/balde
    """
    if container_size not in ContainerSize.values:
        raise InvalidSaleError(f"Unknown container size: {container_size!r}")

    return {
        'id': sale_id or str(uuid.uuid4()),
        'user_id': str(user_id) if user_id else None,
        'product': product,
        'container_size': container_size,
        'observations': observations or '',
        'date': format_sale_date(date or timezone.now()),
    }


def sort_sales(sales: list[dict]) -> list[dict]:
    """Return a new list ordered by date, most recent first."""
    return sorted(sales, key=lambda sale: parse_sale_date(sale['date']), reverse=True)


def compute_last_purchase(sales: list[dict], fallback=None):
    """Most recent sale date, or ``fallback`` when there are no sales."""
    if not sales:
        return fallback
    return max(parse_sale_date(sale['date']) for sale in sales)


def find_sale(sales: list[dict], sale_id) -> Optional[dict]:
    sale_id = str(sale_id)
    return next((sale for sale in sales if sale.get('id') == sale_id), None)


def append_sale(sales: list[dict], sale: dict):
    """Add a sale, re-sort, and take the first element's date as last purchase."""
    updated = sort_sales([*sales, sale])
    return updated, parse_sale_date(updated[0]['date'])


def replace_sale(sales: list[dict], updated_sale: dict, fallback=None):
    """
    Replace the sale with the same id in place, then re-sort.

    An id that is not in the list leaves the list unchanged; last purchase
    is then the current newest date (``fallback`` for an empty list).
    """
    sale_id = updated_sale.get('id')
    if find_sale(sales, sale_id) is None:
        return list(sales), compute_last_purchase(sales, fallback)

    replaced = [
        updated_sale if sale.get('id') == sale_id else sale
        for sale in sales
    ]
    updated = sort_sales(replaced)
    return updated, parse_sale_date(updated[0]['date'])


def merge_sale_changes(sale: dict, changes: dict) -> dict:
    """
    Return a copy of ``sale`` with editable fields overwritten.

    Keys outside the editable set (id, owner) are ignored.
    """
    merged = dict(sale)
    for field in EDITABLE_SALE_FIELDS:
        if field not in changes:
            continue
        value = changes[field]
        if field == 'container_size' and value not in ContainerSize.values:
            raise InvalidSaleError(f"Unknown container size: {value!r}")
        if field == 'date':
            value = format_sale_date(value)
        if field == 'observations':
            value = value or ''
        merged[field] = value
    return merged


def remove_sale(sales: list[dict], sale_id, previous_last_purchase=None):
    """
    Remove the sale with ``sale_id``.

    With sales remaining, last purchase becomes the newest remaining date.
    Removing the only sale keeps ``previous_last_purchase`` as is.
    """
    sale_id = str(sale_id)
    remaining = [sale for sale in sales if sale.get('id') != sale_id]
    if not remaining:
        return [], previous_last_purchase
    updated = sort_sales(remaining)
    return updated, parse_sale_date(updated[0]['date'])
