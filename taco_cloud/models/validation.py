# ==============================================================================
# VALIDACIONES DE FORMULARIO
# ==============================================================================
# Reglas puras sin acceso a repositorios. Devuelven {campo: mensaje};
# un diccionario vacío significa que todo es válido.
# ==============================================================================

import re
from typing import Dict, Mapping

CC_EXPIRATION_PATTERN = re.compile(r'^(0[1-9]|1[0-2])/([1-9][0-9])$')
CC_CVV_PATTERN = re.compile(r'^\d{3}$')

REQUIRED_DELIVERY_MESSAGES = {
    'delivery_name': 'Name is required',
    'delivery_street': 'Street is required',
    'delivery_city': 'City is required',
    'delivery_state': 'State is required',
    'delivery_zip': 'Zip code is required',
}


def is_blank(value) -> bool:
    return value is None or not str(value).strip()


def luhn_valid(number: str) -> bool:
    """
    Verifica un número de tarjeta con el algoritmo de Luhn.

    Se ignoran espacios y guiones. Se exigen entre 12 y 19 dígitos.
    """
    digits = re.sub(r'[\s-]', '', number or '')
    if not digits.isdigit() or not 12 <= len(digits) <= 19:
        return False
    total = 0
    for i, ch in enumerate(reversed(digits)):
        d = int(ch)
        if i % 2 == 1:
            d *= 2
            if d > 9:
                d -= 9
        total += d
    return total % 10 == 0


def validate_delivery(fields: Mapping[str, str]) -> Dict[str, str]:
    """
    Valida los campos de entrega y pago del checkout.

    Args:
        fields: Valores enviados (delivery_*, cc_*)

    Returns:
        Errores por campo
    """
    errors = {}
    for name, message in REQUIRED_DELIVERY_MESSAGES.items():
        if is_blank(fields.get(name)):
            errors[name] = message

    if not luhn_valid(fields.get('cc_number') or ''):
        errors['cc_number'] = 'Not a valid credit card number'
    if not CC_EXPIRATION_PATTERN.match((fields.get('cc_expiration') or '').strip()):
        errors['cc_expiration'] = 'Must be formatted MM/YY'
    if not CC_CVV_PATTERN.match((fields.get('cc_cvv') or '').strip()):
        errors['cc_cvv'] = 'Invalid CVV'
    return errors
