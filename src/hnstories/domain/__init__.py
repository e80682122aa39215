"""Domain layer — items, lifecycle reducer, queries, and filtering.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
