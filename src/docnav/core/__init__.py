"""Core content registry and navigation model."""
