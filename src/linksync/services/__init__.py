"""Service layer — the rewrite engine and its ServiceResult wrapper.

Services may import from the domain and infrastructure layers.
They must never import from commands or output.
"""
