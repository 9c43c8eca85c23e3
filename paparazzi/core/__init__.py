"""
Core Business Logic
==================

Core modules for turning render requests into renderer invocations.

Modules:
- rendering: Parameter validation, command building, invocation and artifacts
"""
