"""Infrastructure layer — the SQLite key/value store and the HTTP transport."""
