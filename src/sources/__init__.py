"""
Módulo de fontes de páginas.
Cada fonte implementa `fetch_page(token)`; o extrator não conhece o transporte.
"""

from src.sources.base import PageSource
from src.sources.graphql import CarrefourGraphQLSource

# Registry de fontes disponíveis
SOURCE_REGISTRY: dict[str, type[PageSource]] = {
    "carrefour_bebidas": CarrefourGraphQLSource,
}

__all__ = [
    "PageSource",
    "CarrefourGraphQLSource",
    "SOURCE_REGISTRY",
]
