"""Domain layer — user records, outcomes, and the flat-file codec.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
