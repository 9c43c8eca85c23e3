"""
Data Models
===========

Pydantic models for render parameters, renderer commands and API responses.
"""
