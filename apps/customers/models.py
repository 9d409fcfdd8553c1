from django.conf import settings
from django.db import models
import uuid


class ContainerSize(models.TextChoices):
    LATA = 'lata', 'Lata'
    GALAO = 'galao', 'Galão'
    BALDE = 'balde', 'Balde'


class Customer(models.Model):
    """
    Paint store customer, keyed by CPF.

    ``sales`` holds the purchase history as embedded documents, most recent
    first. Each entry is a dict with ``id``, ``user_id``, ``product``,
    ``container_size``, ``observations`` and ``date`` (ISO-8601).
    ``last_purchase`` mirrors the date of the first entry.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Natural key, stored as 11 digits without punctuation
    cpf = models.CharField(max_length=11, unique=True, db_index=True)
    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20, blank=True)

    # Embedded purchase history
    sales = models.JSONField(default=list, blank=True)
    last_purchase = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='customers_created'
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        indexes = [
            models.Index(fields=['last_purchase'], name='customers_last_purchase_idx'),
            models.Index(fields=['name'], name='customers_name_idx'),
        ]
        ordering = ['-last_purchase', '-created_at']

    def __str__(self):
        return f"{self.name} ({self.cpf})"

    @property
    def sale_count(self):
        return len(self.sales or [])

    def get_sale(self, sale_id):
        """Return the embedded sale with the given id, or None."""
        for sale in self.sales or []:
            if sale.get('id') == str(sale_id):
                return sale
        return None
