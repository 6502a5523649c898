"""linksync — keep link display text in step with note titles."""

__version__ = "0.1.0"
