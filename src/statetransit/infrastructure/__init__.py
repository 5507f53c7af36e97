"""Infrastructure layer: persistence helpers built on SQLAlchemy Core."""
