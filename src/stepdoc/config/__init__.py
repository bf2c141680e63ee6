"""Configuration: section models, settings loading, logging setup."""
