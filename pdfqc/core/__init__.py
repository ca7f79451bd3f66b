"""Core infrastructure: configuration, logging, errors, HTTP helpers."""
