"""
shared/__init__.py

Shared utilities and models used across multiple modules.

This package contains common functionality that is used by the engine,
the services and the API layer:
- models: Enumerations, immutable records and request/response schemas
- utils: Text helpers for logging and mention handling
"""
