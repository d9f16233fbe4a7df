"""Repositories and derived-state engines."""
