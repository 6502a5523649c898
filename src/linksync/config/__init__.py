"""Configuration — section models, unified settings, discovery, logging."""
