"""Core infrastructure: settings, database, security, errors."""
