"""Pydantic models for Central.IA."""
