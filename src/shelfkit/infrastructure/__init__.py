"""Infrastructure layer — blob stores backed by memory, files, or SQLite.

This layer depends on stdlib and third-party libs (SQLAlchemy).
It must never import from domain, services, or output.
"""
