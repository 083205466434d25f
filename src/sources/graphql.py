"""
Fonte de páginas via API GraphQL do Carrefour Mercado.
https://mercado.carrefour.com.br/api/graphql

A vitrine (VTEX FastStore) expõe a operação `ProductsQuery`, paginada por
cursor: `first` define o tamanho do lote e `after` o cursor de início.
"""

import json
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from config.settings import get_settings
from config.sources import CARREFOUR_BEBIDAS_CONFIG, PaginationStyle, SourceConfig
from src.core.exceptions import ShapeValidationError, SourceUnavailable
from src.core.models import PageRequest, PageResult
from src.sources.base import PageSource


class CarrefourGraphQLSource(PageSource):
    """
    Fonte GraphQL para produtos do Carrefour Mercado.

    Estrutura da resposta:
    - data.search.products.edges[].node.name  -> nome do produto
    - data.search.products.pageInfo.hasNextPage
    - data.search.products.pageInfo.endCursor
    - data.search.products.pageInfo.totalCount
    """

    def __init__(
        self,
        config: Optional[SourceConfig] = None,
        page_size: int = 100,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        """
        Inicializa a fonte.

        Args:
            config: Configuração da fonte (padrão: Carrefour bebidas)
            page_size: Produtos por requisição
            client: Cliente HTTP externo (não é fechado por esta fonte)
            timeout: Timeout por requisição em segundos
        """
        super().__init__(page_size=page_size)
        self.config = config or CARREFOUR_BEBIDAS_CONFIG
        self.settings = get_settings()
        self._timeout = timeout or float(self.settings.request_timeout)
        self._client = client
        self._owns_client = client is None

    @property
    def source_id(self) -> str:
        return self.config.id

    @property
    def offset_pagination(self) -> bool:
        """Indica se o token avança por offset."""
        return self.config.pagination is PaginationStyle.OFFSET

    # CICLO DE VIDA

    async def open(self) -> None:
        """Cria o cliente HTTP, se nenhum foi injetado."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={
                    "User-Agent": self.settings.user_agent,
                    "Accept": "application/json",
                    "Accept-Language": "pt-BR,pt;q=0.9,en-US;q=0.8,en;q=0.7",
                },
            )
            self._owns_client = True

    async def close(self) -> None:
        """Fecha o cliente HTTP criado por esta fonte."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # QUERY

    def build_variables(self, request: PageRequest) -> dict[str, Any]:
        """
        Monta as variáveis da `ProductsQuery`.

        Args:
            request: Cursor e tamanho do lote

        Returns:
            Dicionário de variáveis GraphQL
        """
        return {
            "isPharmacy": self.config.is_pharmacy,
            "first": request.page_size,
            "after": request.cursor,
            "sort": self.config.sort,
            "term": self.config.term,
            "selectedFacets": self.config.selected_facets(),
        }

    def build_params(self, token: str) -> dict[str, str]:
        """Parâmetros de query string da requisição GET."""
        request = PageRequest(cursor=token, page_size=self.page_size)
        return {
            "operationName": self.config.operation_name,
            "variables": json.dumps(self.build_variables(request), separators=(",", ":")),
        }

    async def fetch_page(self, token: str) -> PageResult:
        """
        Busca um lote de produtos a partir do cursor `token`.

        Args:
            token: Cursor de início (`after`)

        Returns:
            Página com os nomes dos produtos

        Raises:
            SourceUnavailable: Erro de rede, status HTTP, JSON ou erro GraphQL
            ShapeValidationError: Resposta sem `data.search.products`
        """
        if self._client is None:
            await self.open()

        self.logger.debug(
            "Buscando lote",
            source=self.source_id,
            cursor=token,
            first=self.page_size,
        )

        try:
            response = await self._client.get(
                self.config.graphql_url,
                params=self.build_params(token),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SourceUnavailable(
                f"Status {e.response.status_code}",
                source_id=self.source_id,
                token=token,
                status_code=e.response.status_code,
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise SourceUnavailable(
                "Erro ao buscar dados da API",
                source_id=self.source_id,
                token=token,
                cause=e,
            ) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise SourceUnavailable(
                "Resposta não é JSON válido",
                source_id=self.source_id,
                token=token,
                cause=e,
            ) from e

        return self.parse_payload(payload, token)

    def parse_payload(self, payload: Any, token: Optional[str] = None) -> PageResult:
        """
        Converte a resposta GraphQL em PageResult.

        Args:
            payload: JSON decodificado
            token: Cursor usado (para mensagens de erro)

        Returns:
            Página extraída
        """
        if not isinstance(payload, dict):
            raise ShapeValidationError(field="data", raw_data=str(payload))

        data = payload.get("data")
        if data is None and payload.get("errors"):
            raise SourceUnavailable(
                "Erro GraphQL",
                source_id=self.source_id,
                token=token,
                details={"errors": payload["errors"][:3]},
            )

        try:
            products = data["search"]["products"]
        except (KeyError, TypeError) as e:
            raise ShapeValidationError(
                field="data.search.products",
                raw_data=str(payload),
                cause=e,
            ) from e

        if not isinstance(products, dict):
            raise ShapeValidationError(field="data.search.products", raw_data=str(payload))

        edges = products.get("edges")
        page_info = products.get("pageInfo")

        if not isinstance(edges, list):
            raise ShapeValidationError(field="products.edges", raw_data=str(products))
        if not isinstance(page_info, dict) or "hasNextPage" not in page_info:
            raise ShapeValidationError(field="products.pageInfo", raw_data=str(products))

        names = []
        for edge in edges:
            if edge is None:
                continue
            if not isinstance(edge, dict):
                raise ShapeValidationError(field="products.edges", raw_data=str(edge))

            node = edge.get("node")
            if node is not None and not isinstance(node, dict):
                raise ShapeValidationError(field="products.edges.node", raw_data=str(node))

            name = (node or {}).get("name")
            if isinstance(name, str) and name.strip():
                names.append(name)
            else:
                self.logger.debug("Produto sem nome ignorado", node=str(node)[:100])

        total_count = page_info.get("totalCount")

        try:
            return PageResult(
                records=names,
                has_more=bool(page_info["hasNextPage"]),
                next_token=page_info.get("endCursor"),
                total_count=total_count if isinstance(total_count, int) else None,
            )
        except ValidationError as e:
            raise ShapeValidationError(
                field="products.pageInfo",
                raw_data=str(page_info),
                cause=e,
            ) from e
