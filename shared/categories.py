"""Fuente unica y helpers para categorias de inventario."""

from __future__ import annotations

import unicodedata

INVENTORY_CATEGORIES: tuple[str, ...] = (
    "Mica",
    "Funda",
    "Accesorio",
    "Herramienta",
)
DEFAULT_CATEGORY = "Accesorio"

# Pestaña de navegacion -> filtro de categoria (substring en minusculas).
INVENTORY_TAB_FILTERS: dict[str, str] = {
    "micas": "mica",
    "fundas": "funda",
    "accesorios": "accesorio",
    "herramientas": "herramienta",
}

_TITLES_BY_FILTER: dict[str, str] = {
    "mica": "Inventario de Micas",
    "funda": "Inventario de Fundas",
    "accesorio": "Inventario de Accesorios",
    "herramienta": "Inventario de Herramientas",
}


def fold_text(value: str) -> str:
    """Normaliza texto para comparar sin mayusculas ni acentos."""
    decomposed = unicodedata.normalize("NFKD", value or "")
    without_marks = "".join(char for char in decomposed if not unicodedata.combining(char))
    return without_marks.casefold()


def category_from_filter(category_filter: str) -> str:
    """Resuelve la categoria por defecto de un formulario abierto desde un filtro."""
    filter_key = fold_text(category_filter.strip())
    if not filter_key:
        return DEFAULT_CATEGORY

    for category in INVENTORY_CATEGORIES:
        if filter_key in fold_text(category):
            return category

    return DEFAULT_CATEGORY


def matches_category(category: str, category_filter: str) -> bool:
    """Indica si una categoria contiene el filtro (sin distinguir mayusculas)."""
    return fold_text(category_filter.strip()) in fold_text(category)


def inventory_title(category_filter: str) -> str:
    """Titulo de la lista de inventario para un filtro de categoria."""
    return _TITLES_BY_FILTER.get(category_filter.strip().lower(), "Inventario General")
