"""Services for customers business logic."""

from .exceptions import (
    CustomersServiceError,
    CustomerNotFoundError,
    SaleNotFoundError,
    InvalidSaleError,
    CpfValidationUnavailableError,
)
from .reconciliation import (
    build_sale,
    sort_sales,
    compute_last_purchase,
    find_sale,
    append_sale,
    replace_sale,
    merge_sale_changes,
    remove_sale,
    parse_sale_date,
)
from .customer_management import (
    get_customer_by_id,
    get_customer_by_cpf,
    register_sale,
    update_customer,
)
from .sale_management import (
    update_sale,
    delete_sale,
)
from .customer_search import (
    search_customers,
    list_sales,
)
from .cpf_validation import (
    has_cpf_format,
    validate_cpf,
)

__all__ = [
    # Exceptions
    'CustomersServiceError',
    'CustomerNotFoundError',
    'SaleNotFoundError',
    'InvalidSaleError',
    'CpfValidationUnavailableError',
    # Reconciliation
    'build_sale',
    'sort_sales',
    'compute_last_purchase',
    'find_sale',
    'append_sale',
    'replace_sale',
    'merge_sale_changes',
    'remove_sale',
    'parse_sale_date',
    # Customer Management
    'get_customer_by_id',
    'get_customer_by_cpf',
    'register_sale',
    'update_customer',
    # Sale Management
    'update_sale',
    'delete_sale',
    # Search
    'search_customers',
    'list_sales',
    # CPF Validation
    'has_cpf_format',
    'validate_cpf',
]
