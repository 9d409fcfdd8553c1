from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'customers'

router = DefaultRouter()
router.register(r'customers', views.CustomerViewSet, basename='customer')

urlpatterns = [
    # Customer ViewSet routes
    # GET    /api/customers/                          - List customers (?search=)
    # GET    /api/customers/{id}/                     - Customer page with sales
    # PATCH  /api/customers/{id}/                     - Edit name/phone

    # Custom actions
    # GET    /api/customers/by-cpf/{cpf}/             - Look up by CPF
    # POST   /api/customers/sales/                    - Register a sale
    # PATCH  /api/customers/{id}/sales/{sale_id}/     - Edit a sale
    # DELETE /api/customers/{id}/sales/{sale_id}/     - Delete a sale

    # Flat sale history
    path('sales/', views.sale_history, name='sale-history'),

    # CPF form validation
    path('cpf/validate/', views.cpf_validate, name='cpf-validate'),

    # Include router URLs
    path('', include(router.urls)),
]
