"""
Test Suite
==========

Test suite matching the paparazzi/ package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: HTTP tests running the stub renderer through the app
"""
