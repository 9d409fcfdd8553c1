"""Input masks for Brazilian document and phone fields."""

import re

_NON_DIGITS = re.compile(r'\D')

CPF_LENGTH = 11


def only_digits(value):
    """Strip everything but digits (``'123.456.789-00'`` -> ``'12345678900'``)."""
    if not value:
        return ''
    return _NON_DIGITS.sub('', str(value))


def mask_cpf(value):
    """
    Format a CPF as the user types it.

    The mask is applied progressively, so partial input renders partially:
    ``'1234'`` -> ``'123.4'`` and ``'12345678900'`` -> ``'123.456.789-00'``.
    Digits beyond the eleventh are dropped.
    """
    digits = only_digits(value)[:CPF_LENGTH]
    if len(digits) <= 3:
        return digits
    if len(digits) <= 6:
        return f'{digits[:3]}.{digits[3:]}'
    if len(digits) <= 9:
        return f'{digits[:3]}.{digits[3:6]}.{digits[6:]}'
    return f'{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}'


def mask_phone(value):
    """Format a phone with area code: ``(11) 99999-9999`` or ``(11) 3333-4444``."""
    digits = only_digits(value)[:11]
    if len(digits) <= 2:
        return digits
    area, number = digits[:2], digits[2:]
    if len(number) <= 4:
        return f'({area}) {number}'
    split = 5 if len(number) == 9 else 4
    return f'({area}) {number[:split]}-{number[split:]}'
