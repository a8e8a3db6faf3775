from decimal import Decimal
from typing import Union
from babel.numbers import format_currency as babel_format_currency


def format_currency(value: Union[Decimal, float], locale_str: str = 'pt_BR') -> str:
    return babel_format_currency(value, 'BRL', locale=locale_str)


def split_name(full_name: str, default_first_name: str = "Cliente"):
    parts = (full_name or "").strip().split(" ", 1)
    first_name = parts[0] or default_first_name
    last_name = parts[1].strip() if len(parts) > 1 else ""
    return first_name, last_name
