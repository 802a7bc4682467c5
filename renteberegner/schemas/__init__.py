"""Pydantic contracts for the HTTP API."""
