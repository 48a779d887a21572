"""
Adapters for the flight result pipeline.

Concrete implementations of the ports: search caches, enrichment and
prediction stages, and upstream provider clients.
"""
