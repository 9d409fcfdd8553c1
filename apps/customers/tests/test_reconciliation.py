from datetime import datetime, timezone as dt_timezone

import pytest

from apps.customers.services import (
    InvalidSaleError,
    append_sale,
    build_sale,
    compute_last_purchase,
    merge_sale_changes,
    remove_sale,
    replace_sale,
    sort_sales,
)
from apps.customers.tests.conftest import make_sale


def utc(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


@pytest.fixture
def sales():
    return [
        make_sale('b', '2024-03-10T15:00:00+00:00'),
        make_sale('a', '2024-01-05T10:30:00+00:00'),
    ]


class TestBuildSale:

    def test_generates_id_and_timestamp(self):
        sale = build_sale(user_id='u-1', product='Tinta Acrílica', container_size='lata')

        assert sale['id']
        assert sale['user_id'] == 'u-1'
        assert sale['observations'] == ''
        assert datetime.fromisoformat(sale['date']).tzinfo is not None

    def test_unique_ids(self):
        first = build_sale(user_id=None, product='Esmalte', container_size='galao')
        second = build_sale(user_id=None, product='Esmalte', container_size='galao')

        assert first['id'] != second['id']
        assert first['user_id'] is None

    def test_rejects_unknown_container_size(self):
        with pytest.raises(InvalidSaleError):
            build_sale(user_id=None, product='Esmalte', container_size='tambor')


class TestOrdering:

    def test_sort_most_recent_first(self, sales):
        ordered = sort_sales(list(reversed(sales)))

        assert [sale['id'] for sale in ordered] == ['b', 'a']

    def test_sort_handles_mixed_offsets(self):
        # 12:00-03:00 is 15:00 UTC, later than 14:00 UTC
        mixed = [
            make_sale('utc', '2024-03-10T14:00:00+00:00'),
            make_sale('brt', '2024-03-10T12:00:00-03:00'),
        ]

        assert [sale['id'] for sale in sort_sales(mixed)] == ['brt', 'utc']

    def test_last_purchase_empty_uses_fallback(self):
        fallback = utc(2023, 12, 1)

        assert compute_last_purchase([], fallback) == fallback
        assert compute_last_purchase([]) is None


class TestAppendSale:

    def test_newer_sale_goes_first(self, sales):
        new = make_sale('c', '2024-04-01T08:00:00+00:00')

        updated, last_purchase = append_sale(sales, new)

        assert [sale['id'] for sale in updated] == ['c', 'b', 'a']
        assert last_purchase == utc(2024, 4, 1, 8)

    def test_backdated_sale_keeps_last_purchase(self, sales):
        backdated = make_sale('z', '2023-06-01T08:00:00+00:00')

        updated, last_purchase = append_sale(sales, backdated)

        assert updated[-1]['id'] == 'z'
        assert last_purchase == utc(2024, 3, 10, 15)

    def test_does_not_mutate_input(self, sales):
        append_sale(sales, make_sale('c', '2024-04-01T08:00:00+00:00'))

        assert len(sales) == 2


class TestReplaceSale:

    def test_moving_date_back_reorders(self, sales):
        changed = merge_sale_changes(sales[0], {'date': '2023-01-01T00:00:00+00:00'})

        updated, last_purchase = replace_sale(sales, changed)

        assert [sale['id'] for sale in updated] == ['a', 'b']
        assert last_purchase == utc(2024, 1, 5, 10, 30)

    def test_unknown_id_is_noop(self, sales):
        ghost = make_sale('ghost', '2025-01-01T00:00:00+00:00')

        updated, last_purchase = replace_sale(sales, ghost)

        assert updated == sales
        assert last_purchase == utc(2024, 3, 10, 15)


class TestMergeSaleChanges:

    def test_only_editable_fields_change(self, sales):
        merged = merge_sale_changes(sales[0], {
            'product': 'Coral Rendimento Extra',
            'id': 'hijacked',
            'user_id': 'someone-else',
        })

        assert merged['product'] == 'Coral Rendimento Extra'
        assert merged['id'] == 'b'
        assert merged['user_id'] == sales[0]['user_id']

    def test_none_observations_become_empty(self, sales):
        assert merge_sale_changes(sales[0], {'observations': None})['observations'] == ''

    def test_invalid_container_size(self, sales):
        with pytest.raises(InvalidSaleError):
            merge_sale_changes(sales[0], {'container_size': 'barril'})

    def test_invalid_date(self, sales):
        with pytest.raises(InvalidSaleError):
            merge_sale_changes(sales[0], {'date': 'ontem'})


class TestRemoveSale:

    def test_remove_newest_moves_last_purchase_back(self, sales):
        updated, last_purchase = remove_sale(sales, 'b', utc(2024, 3, 10, 15))

        assert [sale['id'] for sale in updated] == ['a']
        assert last_purchase == utc(2024, 1, 5, 10, 30)

    def test_remove_only_sale_keeps_previous_last_purchase(self):
        previous = utc(2024, 3, 10, 15)

        updated, last_purchase = remove_sale(
            [make_sale('only', '2024-03-10T15:00:00+00:00')], 'only', previous
        )

        assert updated == []
        assert last_purchase == previous
