from rest_framework import serializers
import logging

from .formatting import only_digits, mask_cpf, mask_phone, CPF_LENGTH
from .models import Customer, ContainerSize
from .services import validate_cpf, CpfValidationUnavailableError

logger = logging.getLogger(__name__)


NAME_MESSAGES = {
    'blank': 'O nome deve ter pelo menos 2 caracteres.',
    'min_length': 'O nome deve ter pelo menos 2 caracteres.',
}

PRODUCT_MESSAGES = {
    'blank': 'O nome do produto deve ter pelo menos 2 caracteres.',
    'min_length': 'O nome do produto deve ter pelo menos 2 caracteres.',
}

CONTAINER_SIZE_MESSAGES = {
    'invalid_choice': '"{input}" não é um tamanho válido. Use lata, galao ou balde.',
}


def validate_cpf_field(value):
    """
    Normalize a CPF form field to digits and run the CPF validator.

    An unavailable validator does not block the form; the format check has
    already passed at that point.
    """
    digits = only_digits(value)
    if len(digits) != CPF_LENGTH:
        raise serializers.ValidationError('O CPF deve ter 11 dígitos.')

    try:
        is_valid = validate_cpf(mask_cpf(digits))
    except CpfValidationUnavailableError as e:
        logger.warning("CPF validator unavailable, accepting pre-checked CPF: %s", e)
        return digits

    if not is_valid:
        raise serializers.ValidationError('CPF inválido.')
    return digits


# =============================================================================
# Input Serializers
# =============================================================================

class SaleCreateSerializer(serializers.Serializer):
    """
    Validate the "new sale" form.

    Fields:
        customer_name (str): At least 2 characters
        customer_cpf (str): Masked or raw, normalized to 11 digits
        customer_phone (str): Optional
        product (str): At least 2 characters
        container_size (str): lata, galao or balde
        observations (str): Optional
    """

    customer_name = serializers.CharField(max_length=200, min_length=2, error_messages=NAME_MESSAGES)
    customer_cpf = serializers.CharField(max_length=20)
    customer_phone = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')
    product = serializers.CharField(max_length=200, min_length=2, error_messages=PRODUCT_MESSAGES)
    container_size = serializers.ChoiceField(
        choices=ContainerSize.choices,
        error_messages=CONTAINER_SIZE_MESSAGES,
    )
    observations = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_customer_cpf(self, value):
        return validate_cpf_field(value)


class SaleUpdateSerializer(serializers.Serializer):
    """Validate the "edit sale" form. Every field is optional."""

    product = serializers.CharField(
        max_length=200, min_length=2, required=False, error_messages=PRODUCT_MESSAGES
    )
    container_size = serializers.ChoiceField(
        choices=ContainerSize.choices,
        required=False,
        error_messages=CONTAINER_SIZE_MESSAGES,
    )
    observations = serializers.CharField(required=False, allow_blank=True)
    date = serializers.DateTimeField(required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError('Informe ao menos um campo para alterar.')
        return attrs


class CustomerUpdateSerializer(serializers.Serializer):
    """Validate the "edit customer" form. CPF is not editable."""

    name = serializers.CharField(max_length=200, min_length=2, error_messages=NAME_MESSAGES)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True, default='')


class CustomerFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for the customer list.

    Query Parameters:
        search (str): Name or CPF fragment
    """

    search = serializers.CharField(required=False, allow_blank=True)


class SaleFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for the flat sale history.

    Query Parameters:
        owner (str): ``me`` or a user UUID
        cpf (str): Customer CPF, masked or digits
    """

    owner = serializers.CharField(required=False)
    cpf = serializers.CharField(required=False)

    def validate_owner(self, value):
        if value == 'me':
            return value
        try:
            return str(serializers.UUIDField().to_internal_value(value))
        except serializers.ValidationError:
            raise serializers.ValidationError('Use "me" ou o identificador de um usuário.')


class CpfValidationRequestSerializer(serializers.Serializer):
    cpf = serializers.CharField(max_length=20)


# =============================================================================
# Output Serializers
# =============================================================================

class SaleSerializer(serializers.Serializer):
    """Embedded sale as stored on the customer."""

    id = serializers.CharField(read_only=True)
    user_id = serializers.CharField(read_only=True, allow_null=True)
    product = serializers.CharField(read_only=True)
    container_size = serializers.CharField(read_only=True)
    container_size_display = serializers.SerializerMethodField()
    observations = serializers.CharField(read_only=True)
    date = serializers.CharField(read_only=True)

    def get_container_size_display(self, obj):
        size = obj.get('container_size')
        if size in ContainerSize.values:
            return ContainerSize(size).label
        return size


class SaleHistorySerializer(SaleSerializer):
    """Sale row of the flat history, with the customer denormalized."""

    customer_id = serializers.UUIDField(read_only=True)
    customer_name = serializers.CharField(read_only=True)
    customer_cpf = serializers.CharField(read_only=True)
    customer_phone = serializers.CharField(read_only=True)


class CustomerSerializer(serializers.ModelSerializer):
    """Customer page: details plus full purchase history."""

    sales = SaleSerializer(many=True, read_only=True)
    cpf_masked = serializers.SerializerMethodField()
    phone_masked = serializers.SerializerMethodField()
    created_by_email = serializers.EmailField(source='created_by.email', read_only=True, default=None)

    class Meta:
        model = Customer
        fields = [
            'id',
            'cpf',
            'cpf_masked',
            'name',
            'phone',
            'phone_masked',
            'sales',
            'sale_count',
            'last_purchase',
            'created_by',
            'created_by_email',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_cpf_masked(self, obj):
        return mask_cpf(obj.cpf)

    def get_phone_masked(self, obj):
        return mask_phone(obj.phone)


class CustomerListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for the customer cards."""

    cpf_masked = serializers.SerializerMethodField()

    class Meta:
        model = Customer
        fields = [
            'id',
            'cpf',
            'cpf_masked',
            'name',
            'phone',
            'sale_count',
            'last_purchase',
        ]
        read_only_fields = fields

    def get_cpf_masked(self, obj):
        return mask_cpf(obj.cpf)
