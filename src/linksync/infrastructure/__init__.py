"""Infrastructure layer — filesystem-backed store and metadata index.

Concrete implementations of the collaborator protocols in
:mod:`linksync.services.contracts`, over a directory of markdown files.
"""
