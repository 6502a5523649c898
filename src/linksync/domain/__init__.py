"""Domain layer — link syntax, title policy, alias matching, value types.

This layer depends only on stdlib and ruamel.yaml.
It must never import from services, infrastructure, commands, or config.
"""
