"""Testes do extrator de bebidas."""
