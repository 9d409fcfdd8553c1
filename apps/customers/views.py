from rest_framework import viewsets, mixins, status, serializers as drf_serializers
from rest_framework.decorators import action, api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from django.conf import settings
from django.db import DatabaseError
from drf_spectacular.utils import extend_schema, OpenApiParameter
import logging

from .models import Customer
from .serializers import (
    CustomerSerializer,
    CustomerListSerializer,
    SaleHistorySerializer,
    # Input serializers
    SaleCreateSerializer,
    SaleUpdateSerializer,
    CustomerUpdateSerializer,
    CustomerFilterSerializer,
    SaleFilterSerializer,
    CpfValidationRequestSerializer,
)
from .services import (
    search_customers,
    get_customer_by_id,
    get_customer_by_cpf,
    register_sale,
    update_customer,
    update_sale,
    delete_sale,
    list_sales,
    validate_cpf,
    has_cpf_format,
    CustomerNotFoundError,
    SaleNotFoundError,
    InvalidSaleError,
    CpfValidationUnavailableError,
)

logger = logging.getLogger(__name__)

CUSTOMER_NOT_FOUND = 'Cliente não encontrado.'
SALE_NOT_FOUND = 'Venda não encontrada.'


# Response serializers for API documentation
class CustomerMutationResponseSerializer(drf_serializers.Serializer):
    message = drf_serializers.CharField()
    customer = CustomerSerializer()


class SaleRegisteredResponseSerializer(CustomerMutationResponseSerializer):
    created = drf_serializers.BooleanField()


class CpfValidationResponseSerializer(drf_serializers.Serializer):
    cpf = drf_serializers.CharField()
    is_valid = drf_serializers.BooleanField()
    checked_remotely = drf_serializers.BooleanField()


class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()


def _error(message, http_status):
    return Response({'error': message}, status=http_status)


class CustomerPagination(PageNumberPagination):
    """Custom pagination for customers."""
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 200

    def get_paginated_response(self, data):
        # count is the filtered count; total counts every customer
        response = super().get_paginated_response(data)
        response.data['total'] = Customer.objects.count()
        return response

    def get_paginated_response_schema(self, schema):
        paginated = super().get_paginated_response_schema(schema)
        paginated['properties']['total'] = {'type': 'integer', 'example': 250}
        return paginated


class CustomerViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    ViewSet for customers and their embedded sales.

    list: Customers ordered by last purchase (search by name or CPF)
    retrieve: Customer page with full purchase history
    partial_update: Edit name/phone
    by_cpf: Look a customer up by CPF
    register_sale: Record a sale, creating the customer if needed
    sale: Edit or delete one sale
    """

    queryset = Customer.objects.all()
    serializer_class = CustomerSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = CustomerPagination
    lookup_value_regex = r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}"

    def get_queryset(self):
        """Filter customers using input serializer validation."""
        filter_serializer = CustomerFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        return search_customers(search=filter_serializer.validated_data.get('search'))

    def get_serializer_class(self):
        """Use different serializers for different actions."""
        if self.action == 'list':
            return CustomerListSerializer
        return CustomerSerializer

    @extend_schema(
        parameters=[OpenApiParameter('search', str, description='Name or CPF fragment')],
        responses={200: CustomerListSerializer(many=True), 503: ErrorResponseSerializer},
    )
    def list(self, request, *args, **kwargs):
        try:
            return super().list(request, *args, **kwargs)
        except DatabaseError:
            logger.exception("Error fetching customers")
            return _error('Não foi possível carregar os clientes.', status.HTTP_503_SERVICE_UNAVAILABLE)

    @extend_schema(responses={200: CustomerSerializer, 404: ErrorResponseSerializer})
    def retrieve(self, request, pk=None):
        try:
            customer = get_customer_by_id(customer_id=pk)
        except CustomerNotFoundError:
            return _error(CUSTOMER_NOT_FOUND, status.HTTP_404_NOT_FOUND)
        return Response(CustomerSerializer(customer).data)

    @extend_schema(
        request=CustomerUpdateSerializer,
        responses={
            200: CustomerMutationResponseSerializer,
            404: ErrorResponseSerializer,
            503: ErrorResponseSerializer,
        },
    )
    def partial_update(self, request, pk=None):
        """Edit a customer's name and phone."""
        serializer = CustomerUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            customer = update_customer(customer_id=pk, **serializer.validated_data)
        except CustomerNotFoundError:
            return _error(CUSTOMER_NOT_FOUND, status.HTTP_404_NOT_FOUND)
        except DatabaseError:
            logger.exception("Error updating customer %s", pk)
            return _error(
                'Não foi possível atualizar os dados do cliente.',
                status.HTTP_503_SERVICE_UNAVAILABLE
            )

        return Response({
            'message': 'Dados do cliente atualizados.',
            'customer': CustomerSerializer(customer).data,
        })

    @extend_schema(responses={200: CustomerSerializer, 404: ErrorResponseSerializer})
    @action(detail=False, methods=['get'], url_path=r'by-cpf/(?P<cpf>[^/]+)', url_name='by-cpf')
    def by_cpf(self, request, cpf=None):
        """
        Get a customer by CPF (masked or digits).

        GET /api/customers/by-cpf/{cpf}/
        """
        try:
            customer = get_customer_by_cpf(cpf=cpf)
        except CustomerNotFoundError:
            return _error(CUSTOMER_NOT_FOUND, status.HTTP_404_NOT_FOUND)
        except DatabaseError:
            logger.exception("Error fetching customer by CPF")
            return _error('Erro ao buscar cliente.', status.HTTP_503_SERVICE_UNAVAILABLE)
        return Response(CustomerSerializer(customer).data)

    @extend_schema(
        request=SaleCreateSerializer,
        responses={
            200: SaleRegisteredResponseSerializer,
            201: SaleRegisteredResponseSerializer,
            400: ErrorResponseSerializer,
            503: ErrorResponseSerializer,
        },
    )
    @action(detail=False, methods=['post'], url_path='sales', url_name='register-sale')
    def register_sale(self, request):
        """
        Record a sale. Creates the customer on first purchase.

        POST /api/customers/sales/
        """
        serializer = SaleCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            customer, created = register_sale(user=request.user, **serializer.validated_data)
        except InvalidSaleError as e:
            return _error(str(e), status.HTTP_400_BAD_REQUEST)
        except DatabaseError:
            logger.exception("Error adding/updating customer for new sale")
            return _error(
                'Não foi possível registrar a venda. Tente novamente.',
                status.HTTP_503_SERVICE_UNAVAILABLE
            )

        return Response({
            'message': 'Venda registrada e cliente atualizado.',
            'created': created,
            'customer': CustomerSerializer(customer).data,
        }, status=status.HTTP_201_CREATED if created else status.HTTP_200_OK)

    @extend_schema(
        methods=['PATCH'],
        request=SaleUpdateSerializer,
        responses={
            200: CustomerMutationResponseSerializer,
            404: ErrorResponseSerializer,
            503: ErrorResponseSerializer,
        },
    )
    @extend_schema(
        methods=['DELETE'],
        responses={
            200: CustomerMutationResponseSerializer,
            404: ErrorResponseSerializer,
            503: ErrorResponseSerializer,
        },
    )
    @action(detail=True, methods=['patch', 'delete'], url_path=r'sales/(?P<sale_id>[^/.]+)', url_name='sale')
    def sale(self, request, pk=None, sale_id=None):
        """
        Edit or delete one sale of the customer.

        PATCH  /api/customers/{id}/sales/{sale_id}/
        DELETE /api/customers/{id}/sales/{sale_id}/
        """
        if request.method == 'DELETE':
            return self._delete_sale(pk, sale_id)

        serializer = SaleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            customer = update_sale(
                customer_id=pk,
                sale_id=sale_id,
                changes=serializer.validated_data,
            )
        except CustomerNotFoundError:
            return _error(CUSTOMER_NOT_FOUND, status.HTTP_404_NOT_FOUND)
        except SaleNotFoundError:
            return _error(SALE_NOT_FOUND, status.HTTP_404_NOT_FOUND)
        except InvalidSaleError as e:
            return _error(str(e), status.HTTP_400_BAD_REQUEST)
        except DatabaseError:
            logger.exception("Error updating sale %s", sale_id)
            return _error('Não foi possível atualizar a venda.', status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response({
            'message': 'Venda atualizada com sucesso.',
            'customer': CustomerSerializer(customer).data,
        })

    def _delete_sale(self, customer_id, sale_id):
        try:
            customer = delete_sale(customer_id=customer_id, sale_id=sale_id)
        except CustomerNotFoundError:
            return _error(CUSTOMER_NOT_FOUND, status.HTTP_404_NOT_FOUND)
        except SaleNotFoundError:
            return _error(SALE_NOT_FOUND, status.HTTP_404_NOT_FOUND)
        except DatabaseError:
            logger.exception("Error deleting sale %s", sale_id)
            return _error('Não foi possível deletar a venda.', status.HTTP_503_SERVICE_UNAVAILABLE)

        return Response({
            'message': 'Venda deletada com sucesso.',
            'customer': CustomerSerializer(customer).data,
        })


@extend_schema(
    parameters=[
        OpenApiParameter('owner', str, description='"me" or a user id'),
        OpenApiParameter('cpf', str, description='Customer CPF'),
    ],
    responses={200: SaleHistorySerializer(many=True), 503: ErrorResponseSerializer},
    description="Flat sale history across customers, most recent first.",
    tags=['sales'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def sale_history(request):
    """List sales across customers, filtered by owner and/or customer CPF."""
    filter_serializer = SaleFilterSerializer(data=request.query_params)
    filter_serializer.is_valid(raise_exception=True)
    params = filter_serializer.validated_data

    owner = params.get('owner')
    if owner == 'me':
        owner = request.user.id

    try:
        rows = list_sales(owner_id=owner, customer_cpf=params.get('cpf'))
    except DatabaseError:
        logger.exception("Error fetching sales")
        return _error('Não foi possível carregar as vendas.', status.HTTP_503_SERVICE_UNAVAILABLE)

    return Response(SaleHistorySerializer(rows, many=True).data)


@extend_schema(
    request=CpfValidationRequestSerializer,
    responses={200: CpfValidationResponseSerializer},
    description="Validate a CPF (format pre-check, then the validation service).",
    tags=['cpf'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def cpf_validate(request):
    """Asynchronous form-field validation for the CPF input."""
    serializer = CpfValidationRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    cpf = serializer.validated_data['cpf']

    checked_remotely = has_cpf_format(cpf) and bool(settings.CPF_VALIDATION_URL)
    try:
        is_valid = validate_cpf(cpf)
    except CpfValidationUnavailableError as e:
        logger.warning("CPF validator unavailable: %s", e)
        # Format already passed the pre-check
        is_valid = True
        checked_remotely = False

    return Response({
        'cpf': cpf,
        'is_valid': is_valid,
        'checked_remotely': checked_remotely,
    })
