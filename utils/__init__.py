"""Auth gate, security, refresh-token and logging helpers."""
