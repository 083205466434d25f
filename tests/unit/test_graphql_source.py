"""
Testes unitários para a fonte GraphQL do Carrefour.
"""

import json

import httpx
import pytest

from config.sources import CARREFOUR_BEBIDAS_CONFIG
from src.core.exceptions import ShapeValidationError, SourceUnavailable
from src.core.types import RunStatus
from src.extraction import extract_all
from src.sources import CarrefourGraphQLSource
from tests.fixtures.graphql_responses import (
    BEBIDAS_PAGES,
    GRAPHQL_ERROR_PAYLOAD,
    INVALID_STRUCTURE_PAYLOAD,
    products_payload,
)


def make_source(handler, page_size: int = 2) -> CarrefourGraphQLSource:
    """Fonte com transporte falso."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CarrefourGraphQLSource(page_size=page_size, client=client, timeout=5)


class TestQuery:
    """Testes da montagem da ProductsQuery."""

    def test_variaveis_da_query(self):
        """Variáveis seguem o formato esperado pela vitrine."""
        source = CarrefourGraphQLSource(page_size=100, timeout=5)
        params = source.build_params("200")

        assert params["operationName"] == "ProductsQuery"

        variables = json.loads(params["variables"])
        assert variables["first"] == 100
        assert variables["after"] == "200"
        assert variables["isPharmacy"] is False
        assert variables["sort"] == "score_desc"
        assert variables["term"] == ""

    def test_facets_de_categoria_e_regiao(self):
        """Facets incluem bebidas, canal, locale e região."""
        facets = CARREFOUR_BEBIDAS_CONFIG.selected_facets()
        region = CARREFOUR_BEBIDAS_CONFIG.region_id

        assert {"key": "category-1", "value": "bebidas"} in facets
        assert {"key": "category-1", "value": "4599"} in facets
        assert {"key": "locale", "value": "pt-BR"} in facets
        assert {"key": "region-id", "value": region} in facets

        channel = next(f for f in facets if f["key"] == "channel")
        assert json.loads(channel["value"]) == {"salesChannel": 2, "regionId": region}


class TestFetchPage:
    """Testes de fetch_page com transporte simulado."""

    @pytest.mark.asyncio
    async def test_pagina_valida(self):
        """Extrai nomes, cursor e total da resposta."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=BEBIDAS_PAGES[0])

        async with make_source(handler) as source:
            result = await source.fetch_page("0")

        assert result.records == ["Refrigerante Coca-Cola 2L", "Água Mineral Crystal 500ml"]
        assert result.has_more is True
        assert result.next_token == "2"
        assert result.total_count == 5

        request = seen[0]
        assert request.url.path == "/api/graphql"
        assert request.url.params["operationName"] == "ProductsQuery"
        assert json.loads(request.url.params["variables"])["after"] == "0"

    @pytest.mark.asyncio
    async def test_status_http_de_erro(self):
        """Status 5xx vira SourceUnavailable com o código."""
        source = make_source(lambda request: httpx.Response(503, text="indisponível"))

        with pytest.raises(SourceUnavailable) as exc_info:
            await source.fetch_page("0")

        assert exc_info.value.status_code == 503
        assert exc_info.value.token == "0"

    @pytest.mark.asyncio
    async def test_erro_de_conexao(self):
        """Erro de transporte vira SourceUnavailable."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("conexão recusada", request=request)

        source = make_source(handler)

        with pytest.raises(SourceUnavailable):
            await source.fetch_page("0")

    @pytest.mark.asyncio
    async def test_json_invalido(self):
        """Corpo que não é JSON vira SourceUnavailable."""
        source = make_source(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(SourceUnavailable):
            await source.fetch_page("0")

    @pytest.mark.asyncio
    async def test_erro_graphql(self):
        """Resposta com `errors` e sem `data` vira SourceUnavailable."""
        source = make_source(lambda request: httpx.Response(200, json=GRAPHQL_ERROR_PAYLOAD))

        with pytest.raises(SourceUnavailable):
            await source.fetch_page("0")

    @pytest.mark.asyncio
    async def test_estrutura_invalida(self):
        """Sem data.search.products: ShapeValidationError."""
        source = make_source(lambda request: httpx.Response(200, json=INVALID_STRUCTURE_PAYLOAD))

        with pytest.raises(ShapeValidationError) as exc_info:
            await source.fetch_page("0")

        assert exc_info.value.field == "data.search.products"


class TestParsePayload:
    """Testes de parse_payload."""

    @pytest.fixture
    def source(self) -> CarrefourGraphQLSource:
        return CarrefourGraphQLSource(page_size=2, timeout=5)

    def test_produto_sem_nome_ignorado(self, source):
        """Nós sem nome não entram na página."""
        payload = products_payload(["Água Tônica"], has_next=False, end_cursor=None)
        payload["data"]["search"]["products"]["edges"].append({"node": {"name": None}})
        payload["data"]["search"]["products"]["edges"].append({"node": None})

        result = source.parse_payload(payload)

        assert result.records == ["Água Tônica"]

    def test_sem_total(self, source):
        """totalCount ausente: total desconhecido."""
        payload = products_payload(["Chá Mate"], has_next=False, end_cursor=None)

        assert source.parse_payload(payload).total_count is None

    def test_nome_preservado(self, source):
        """O nome é mantido exatamente como a API devolve."""
        payload = products_payload(["  Cerveja   Brahma 350ml "], has_next=False, end_cursor=None)

        assert source.parse_payload(payload).records == ["  Cerveja   Brahma 350ml "]

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda products: products.update(edges=["oops"]),
            lambda products: products.update(edges=[{"node": ["x"]}]),
            lambda products: products["pageInfo"].update(endCursor=123),
            lambda products: products["pageInfo"].update(totalCount=-1),
        ],
        ids=["edge_nao_objeto", "node_nao_objeto", "cursor_numerico", "total_negativo"],
    )
    def test_payload_malformado(self, source, mutate):
        """Qualquer payload malformado vira ShapeValidationError."""
        payload = products_payload(["Chá Mate"], has_next=True, end_cursor="1", total_count=3)
        mutate(payload["data"]["search"]["products"])

        with pytest.raises(ShapeValidationError):
            source.parse_payload(payload, "0")

    def test_page_info_ausente(self, source):
        """Sem pageInfo: ShapeValidationError."""
        payload = products_payload(["Chá Mate"], has_next=False, end_cursor=None)
        del payload["data"]["search"]["products"]["pageInfo"]

        with pytest.raises(ShapeValidationError):
            source.parse_payload(payload)


class TestExtracaoComPayloadMalformado:
    """Página malformada no meio da extração é repetida, não derruba a coleta."""

    @pytest.mark.asyncio
    async def test_repete_pagina_malformada(self, make_config, sink, sleeper):
        bad = products_payload(["b"], has_next=False, end_cursor=None)
        bad["data"]["search"]["products"]["edges"] = ["oops"]
        responses = {
            "0": [products_payload(["a"], has_next=True, end_cursor="1", total_count=2)],
            "1": [bad, products_payload(["b"], has_next=False, end_cursor=None, total_count=2)],
        }

        def handler(request: httpx.Request) -> httpx.Response:
            after = json.loads(request.url.params["variables"])["after"]
            return httpx.Response(200, json=responses[after].pop(0))

        async with make_source(handler) as source:
            result = await extract_all(source, make_config(), sleep=sleeper)

        assert result.status is RunStatus.SUCCESS
        assert result.records == ["a", "b"]
        assert result.failed_attempts == 1
        assert sink.last == ["a", "b"]
