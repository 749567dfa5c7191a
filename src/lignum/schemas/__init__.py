"""Pydantic request, response and event schemas."""
