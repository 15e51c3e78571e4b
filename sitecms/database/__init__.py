"""Content store: SQLAlchemy models, repositories and the store client."""
