"""
Configuração das fontes de produtos suportadas.
Define endpoint GraphQL, região e filtros de categoria de cada fonte.
"""

import json
from dataclasses import dataclass, field
from enum import Enum


class SourceStatus(str, Enum):
    """Status de uma fonte."""
    ACTIVE = "active"
    DEVELOPMENT = "development"
    DISABLED = "disabled"


class PaginationStyle(str, Enum):
    """Como o token da próxima página é obtido."""
    CURSOR = "cursor"
    OFFSET = "offset"


@dataclass
class CategoryFacet:
    """Filtro de categoria enviado em `selectedFacets`."""

    key: str
    value: str


@dataclass
class SourceConfig:
    """Configuração completa de uma fonte GraphQL."""

    id: str
    display_name: str
    base_url: str
    region_id: str

    graphql_path: str = "/api/graphql"
    operation_name: str = "ProductsQuery"

    status: SourceStatus = SourceStatus.ACTIVE
    pagination: PaginationStyle = PaginationStyle.CURSOR

    # Filtros da busca
    categories: list[CategoryFacet] = field(default_factory=list)
    sales_channel: int = 2
    locale: str = "pt-BR"
    sort: str = "score_desc"
    term: str = ""
    is_pharmacy: bool = False

    # Token da primeira página
    initial_token: str = "0"

    @property
    def graphql_url(self) -> str:
        """URL completa do endpoint GraphQL."""
        return f"{self.base_url}{self.graphql_path}"

    def selected_facets(self) -> list[dict[str, str]]:
        """
        Monta a lista `selectedFacets` da query de produtos.

        Returns:
            Facets de categoria seguidas de canal, locale e região
        """
        facets = [{"key": c.key, "value": c.value} for c in self.categories]
        facets.append({
            "key": "channel",
            "value": json.dumps(
                {"salesChannel": self.sales_channel, "regionId": self.region_id},
                separators=(",", ":"),
            ),
        })
        facets.append({"key": "locale", "value": self.locale})
        facets.append({"key": "region-id", "value": self.region_id})
        return facets


# =============================================================================
# CONFIGURAÇÃO DO CARREFOUR - BEBIDAS
# =============================================================================

CARREFOUR_BEBIDAS_CONFIG = SourceConfig(
    id="carrefour_bebidas",
    display_name="Carrefour Mercado - Bebidas",
    base_url="https://mercado.carrefour.com.br",
    region_id="v2.16805FBD22EC494F5D2BD799FE9F1FB7",
    status=SourceStatus.ACTIVE,
    pagination=PaginationStyle.CURSOR,
    categories=[
        CategoryFacet(key="category-1", value="bebidas"),
        CategoryFacet(key="category-1", value="4599"),
    ],
)


# =============================================================================
# REGISTRO DE FONTES
# =============================================================================

SOURCES_CONFIG: dict[str, SourceConfig] = {
    "carrefour_bebidas": CARREFOUR_BEBIDAS_CONFIG,
}


def get_source_config(source_id: str) -> SourceConfig:
    """
    Retorna configuração de uma fonte.

    Args:
        source_id: ID da fonte

    Returns:
        Configuração da fonte

    Raises:
        ValueError: Se fonte não encontrada
    """
    if source_id not in SOURCES_CONFIG:
        raise ValueError(f"Fonte não encontrada: {source_id}")
    return SOURCES_CONFIG[source_id]


def get_active_sources() -> list[SourceConfig]:
    """Retorna lista de fontes ativas."""
    return [
        config for config in SOURCES_CONFIG.values()
        if config.status in (SourceStatus.ACTIVE, SourceStatus.DEVELOPMENT)
    ]
