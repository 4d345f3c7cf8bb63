"""Adapters for the database, the content repositories and the file store."""
