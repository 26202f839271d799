"""Core models, schemas, database and validation."""
