"""Configuration defaults, loading and settings validation."""
