"""
Management command to re-sort sale histories and fix last purchase dates.

Repairs customers whose embedded sales are out of order or whose
``last_purchase`` does not match their newest sale, e.g. after a manual
edit in the admin or a data import. Customers without sales are left
untouched.

Usage:
    python manage.py recompute_last_purchase
    python manage.py recompute_last_purchase --dry-run
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.customers.models import Customer
from apps.customers.services import sort_sales, compute_last_purchase


class Command(BaseCommand):
    help = 'Re-sort embedded sales and recompute last purchase for every customer'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Show what would be updated without making changes',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']

        stale = []
        for customer in Customer.objects.iterator():
            if not customer.sales:
                continue
            sales = sort_sales(customer.sales)
            last_purchase = compute_last_purchase(sales, customer.last_purchase)
            if sales != customer.sales or last_purchase != customer.last_purchase:
                stale.append((customer, sales, last_purchase))

        if not stale:
            self.stdout.write(
                self.style.SUCCESS('All customers are consistent. Nothing to fix.')
            )
            return

        self.stdout.write(f'\nFound {len(stale)} customer(s) to fix:\n')

        for customer, sales, last_purchase in stale:
            self.stdout.write(
                f'  - {customer.name} ({customer.cpf}) | {len(sales)} sale(s) | '
                f'last purchase: {customer.last_purchase} -> {last_purchase}'
            )

        if dry_run:
            self.stdout.write(
                self.style.WARNING('\n--dry-run mode: No changes made.')
            )
            return

        now = timezone.now()
        with transaction.atomic():
            for customer, sales, last_purchase in stale:
                Customer.objects.filter(pk=customer.pk).update(
                    sales=sales,
                    last_purchase=last_purchase,
                    updated_at=now,
                )

        self.stdout.write(
            self.style.SUCCESS(f'\nSuccessfully fixed {len(stale)} customer(s).')
        )
