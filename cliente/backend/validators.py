"""Validaciones para entradas del cliente."""

from __future__ import annotations

import math


def parse_price(text: str) -> float:
    """Convierte el texto de un campo numerico; retorna 0 si no es un numero."""
    normalized = (text or "").strip().replace(",", ".")
    try:
        value = float(normalized)
    except ValueError:
        return 0.0

    if not math.isfinite(value):
        return 0.0
    return value


def parse_quantity(text: str) -> int:
    """Convierte el texto de una cantidad a entero (truncando decimales)."""
    return int(parse_price(text))
