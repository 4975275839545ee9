"""Infrastructure layer — graph engine and the network data store.

This layer depends on stdlib, the domain layer, and NetworkX.
It must never import from services, commands, or output.
"""
