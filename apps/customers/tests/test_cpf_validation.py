import io
import urllib.error

import pytest

from apps.customers.services import CpfValidationUnavailableError, has_cpf_format, validate_cpf
from apps.customers.services.cpf_validation import request_cpf_validation

URL = 'https://validator.test/cpf'


def respond_with(body, seen=None):
    def urlopen(request, timeout=None):
        if seen is not None:
            seen.append(request)
        return io.BytesIO(body)
    return urlopen


@pytest.mark.parametrize('cpf', ['529.982.247-25', '52998224725', '529982247-25'])
def test_accepted_formats(cpf):
    assert has_cpf_format(cpf)


@pytest.mark.parametrize('cpf', ['', '529.982.247', '529.982.247-2a', '5299822472512'])
def test_rejected_formats(cpf):
    assert not has_cpf_format(cpf)


def test_sends_api_key(monkeypatch):
    seen = []
    monkeypatch.setattr('urllib.request.urlopen', respond_with(b'{"isValid": true}', seen))

    assert request_cpf_validation('529.982.247-25', url=URL, api_key='segredo') is True
    assert seen[0].get_header('Authorization') == 'Bearer segredo'
    assert seen[0].get_method() == 'POST'


def test_http_error_is_unavailable(monkeypatch):
    def server_error(request, timeout=None):
        raise urllib.error.HTTPError(URL, 502, 'Bad Gateway', {}, None)

    monkeypatch.setattr('urllib.request.urlopen', server_error)

    with pytest.raises(CpfValidationUnavailableError):
        request_cpf_validation('529.982.247-25', url=URL)


def test_timeout_is_unavailable(monkeypatch):
    def slow(request, timeout=None):
        raise TimeoutError('timed out')

    monkeypatch.setattr('urllib.request.urlopen', slow)

    with pytest.raises(CpfValidationUnavailableError):
        request_cpf_validation('529.982.247-25', url=URL, timeout=0.1)


@pytest.mark.parametrize('body', [b'not json', b'{"valid": true}', b'{"isValid": "yes"}', b'[]'])
def test_malformed_answer_is_unavailable(monkeypatch, body):
    monkeypatch.setattr('urllib.request.urlopen', respond_with(body))

    with pytest.raises(CpfValidationUnavailableError):
        request_cpf_validation('529.982.247-25', url=URL)


def test_validate_without_url_uses_precheck(settings):
    settings.CPF_VALIDATION_URL = ''

    assert validate_cpf('529.982.247-25') is True
    assert validate_cpf('abc') is False
