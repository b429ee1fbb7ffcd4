"""Domain layer — catalog structure, codes, and validation rules.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, output, or config.
"""
