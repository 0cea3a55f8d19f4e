"""
Utilidades gerais da aplicação
"""

import json
import re
import uuid
from datetime import datetime, date, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional


ZERO = Decimal("0")


class CustomJSONEncoder(json.JSONEncoder):
    """Encoder JSON personalizado"""

    def default(self, obj):
        if isinstance(obj, Decimal):
            return float(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


def new_id() -> str:
    """Gerar identificador único para transações e mensagens"""
    return uuid.uuid4().hex


MAX_AMOUNT_EXPONENT = 15

_EXPONENT_PATTERN = re.compile(r'\d[eE][+-]?\d')


def coerce_amount(value: Any) -> Decimal:
    """Converter qualquer entrada em valor monetário não negativo.

    Entradas inválidas (None, texto sem número, NaN, infinito) viram zero,
    assim como valores fora da faixa de 10^-15 a 10^15. O sinal é
    descartado: receita ou despesa é definido pelo tipo da transação, não
    pelo valor.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        amount = _parse_amount_text(value)
        if amount is None:
            return ZERO
    else:
        return ZERO

    if not amount.is_finite() or amount.is_zero():
        return ZERO

    if abs(amount.adjusted()) > MAX_AMOUNT_EXPONENT:
        return ZERO

    return abs(amount)


def _parse_amount_text(value: str) -> Optional[Decimal]:
    """Número puro (inclusive notação científica) ou valor formatado como moeda"""
    text = value.strip()
    try:
        return Decimal(text)
    except InvalidOperation:
        pass

    # expoente misturado com texto de moeda é ambíguo
    if _EXPONENT_PATTERN.search(text):
        return None

    cleaned = re.sub(r'[^0-9.,]', '', text)
    if not cleaned:
        return None

    if ',' in cleaned and '.' in cleaned:
        # o último separador é o decimal
        if cleaned.rfind(',') > cleaned.rfind('.'):
            cleaned = cleaned.replace('.', '').replace(',', '.')
        else:
            cleaned = cleaned.replace(',', '')
    else:
        cleaned = cleaned.replace(',', '.')

    try:
        return Decimal(cleaned)
    except InvalidOperation:
        return None


def parse_iso_datetime(value: Any) -> Optional[datetime]:
    """Interpretar string ISO-8601 (data ou data e hora); None se inválida"""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def day_key(value: Any) -> Optional[date]:
    """Chave de dia do calendário (ano, mês, dia), independente de locale"""
    parsed = parse_iso_datetime(value)
    if parsed is None:
        return None
    return parsed.date()


def normalize_date_text(value: Any) -> Optional[str]:
    """Normalizar data em ISO; aceita também o formato brasileiro DD/MM/AAAA"""
    if isinstance(value, str):
        text = value.strip()
        if parse_iso_datetime(text) is not None:
            return text
        try:
            return datetime.strptime(text, "%d/%m/%Y").date().isoformat()
        except ValueError:
            return None
    return None


def today_iso() -> str:
    """Data de hoje em ISO (AAAA-MM-DD)"""
    return date.today().isoformat()


def format_currency(value: Any, currency: str = "BRL") -> str:
    """Formatar valor como moeda"""
    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    if currency == "BRL":
        return f"R$ {amount:.2f}"
    return f"{amount:.2f}"
