"""Option resolution and environment settings."""
