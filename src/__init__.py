"""
Extrator paginado de nomes de bebidas do Carrefour Mercado.
"""

__version__ = "0.1.0"
