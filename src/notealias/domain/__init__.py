"""Domain layer — identifiers, document and alias models, invariants.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
