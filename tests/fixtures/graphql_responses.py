"""
Respostas de exemplo da ProductsQuery do Carrefour Mercado.
"""

from typing import Optional


def products_payload(
    names: list[str],
    has_next: bool,
    end_cursor: Optional[str],
    total_count: Optional[int] = None,
) -> dict:
    """Monta um payload no formato da API GraphQL."""
    page_info = {
        "hasNextPage": has_next,
        "endCursor": end_cursor,
    }
    if total_count is not None:
        page_info["totalCount"] = total_count

    return {
        "data": {
            "search": {
                "products": {
                    "pageInfo": page_info,
                    "edges": [
                        {"node": {"name": name, "sku": str(i)}}
                        for i, name in enumerate(names)
                    ],
                }
            }
        }
    }


BEBIDAS_PAGES = [
    products_payload(
        ["Refrigerante Coca-Cola 2L", "Água Mineral Crystal 500ml"],
        has_next=True,
        end_cursor="2",
        total_count=5,
    ),
    products_payload(
        ["Cerveja Heineken Long Neck 330ml", "Suco Del Valle Uva 1L"],
        has_next=True,
        end_cursor="4",
        total_count=5,
    ),
    products_payload(
        ["Energético Red Bull 250ml"],
        has_next=False,
        end_cursor=None,
        total_count=5,
    ),
]

GRAPHQL_ERROR_PAYLOAD = {
    "data": None,
    "errors": [{"message": "Internal server error", "path": ["search"]}],
}

INVALID_STRUCTURE_PAYLOAD = {
    "data": {"search": None},
}
