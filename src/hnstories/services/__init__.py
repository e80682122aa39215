"""Service layer — persisted values, the fetch lifecycle, and session wiring.

Services may import from domain and infrastructure layers.
They must never import from commands, output, or config.
"""
