"""Entrypoints into the application."""
