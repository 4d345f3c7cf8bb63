"""HTTP API for the content backend."""
