"""
CPF validation.

A format pre-check runs locally; CPFs that pass it are sent to the
prompt-based validation service configured by ``CPF_VALIDATION_URL``.

Contract of the remote service::

    POST {CPF_VALIDATION_URL}
    {"cpf": "123.456.789-09"}

    200 {"isValid": true}
"""

from django.conf import settings
import json
import logging
import re
import socket
import urllib.error
import urllib.request

from .exceptions import CpfValidationUnavailableError

logger = logging.getLogger(__name__)

CPF_FORMAT = re.compile(r'^\d{3}\.?\d{3}\.?\d{3}-?\d{2}$')


def has_cpf_format(cpf: str) -> bool:
    """Pre-check: 11 digits, optionally punctuated as 000.000.000-00."""
    return bool(cpf) and CPF_FORMAT.match(cpf.strip()) is not None


def request_cpf_validation(cpf: str, *, url: str, api_key: str = '', timeout: float = 5.0) -> bool:
    """
    Ask the remote validator whether ``cpf`` is valid.

    Raises:
        CpfValidationUnavailableError: On HTTP/network errors, timeouts or
            a response without a boolean ``isValid``
    """
    headers = {
        'Content-Type': 'application/json',
        'Accept': 'application/json',
    }
    if api_key:
        headers['Authorization'] = f'Bearer {api_key}'

    req = urllib.request.Request(
        url,
        data=json.dumps({'cpf': cpf}).encode('utf-8'),
        headers=headers,
        method='POST',
    )

    try:
        with urllib.request.urlopen(req, timeout=timeout) as response:
            payload = json.loads(response.read().decode('utf-8'))
    except urllib.error.HTTPError as e:
        raise CpfValidationUnavailableError(f"Validator answered HTTP {e.code}")
    except urllib.error.URLError as e:
        raise CpfValidationUnavailableError(f"Validator unreachable: {e.reason}")
    except socket.timeout:
        raise CpfValidationUnavailableError(f"Validator timed out after {timeout}s")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CpfValidationUnavailableError(f"Validator sent malformed JSON: {e}")

    is_valid = payload.get('isValid') if isinstance(payload, dict) else None
    if not isinstance(is_valid, bool):
        raise CpfValidationUnavailableError("Validator response has no boolean 'isValid'")
    return is_valid


def validate_cpf(cpf: str) -> bool:
    """
    Return whether ``cpf`` is valid.

    Input failing the format pre-check is rejected without a remote call.
    With no validator configured, the pre-check decides alone.

    Raises:
        CpfValidationUnavailableError: If the remote validator fails
    """
    if not has_cpf_format(cpf):
        return False

    url = getattr(settings, 'CPF_VALIDATION_URL', '')
    if not url:
        return True

    return request_cpf_validation(
        cpf.strip(),
        url=url,
        api_key=getattr(settings, 'CPF_VALIDATION_API_KEY', ''),
        timeout=getattr(settings, 'CPF_VALIDATION_TIMEOUT', 5.0),
    )
