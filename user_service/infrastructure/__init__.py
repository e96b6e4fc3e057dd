"""Infrastructure layer for data persistence.

This package holds the concrete storage implementation the API layer depends
on: the async SQLAlchemy engine and session lifecycle, the declarative
models, and the repositories that expose typed CRUD operations.
"""
