from django.contrib import admin
from django.utils.html import format_html

from apps.customers.formatting import mask_cpf, mask_phone
from apps.customers.models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """Admin interface for customers. Sales are edited through the API."""

    list_display = [
        'name',
        'cpf_display',
        'phone_display',
        'sale_count_badge',
        'last_purchase',
        'created_by',
        'created_at'
    ]
    list_filter = [
        'last_purchase',
        'created_at'
    ]
    search_fields = [
        'name',
        'cpf',
        'phone'
    ]
    readonly_fields = [
        'cpf',
        'sales',
        'last_purchase',
        'created_by',
        'created_at',
        'updated_at'
    ]
    date_hierarchy = 'last_purchase'
    ordering = ['-last_purchase', '-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': (
                'name',
                'cpf',
                'phone',
                'created_by'
            )
        }),
        ('Purchase History', {
            'fields': (
                'last_purchase',
                'sales'
            )
        }),
        ('Metadata', {
            'fields': (
                'created_at',
                'updated_at'
            ),
            'classes': ('collapse',)
        }),
    )

    def cpf_display(self, obj):
        return mask_cpf(obj.cpf)
    cpf_display.short_description = 'CPF'
    cpf_display.admin_order_field = 'cpf'

    def phone_display(self, obj):
        return mask_phone(obj.phone)
    phone_display.short_description = 'Telefone'

    def sale_count_badge(self, obj):
        """Number of sales as a small badge."""
        return format_html(
            '<span style="background: #4C7A5A; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            obj.sale_count
        )
    sale_count_badge.short_description = 'Vendas'
