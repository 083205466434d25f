"""Fixtures de teste: fontes falsas e respostas GraphQL."""
