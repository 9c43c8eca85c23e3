"""
Paparazzi Render Server
=======================

HTTP front end for the paparazzi map renderer. Query parameters on a single
GET endpoint are turned into a renderer command line, the renderer is run,
and the PNG it writes is returned as the response body.

This package provides:
- FastAPI endpoint and app factory
- Query parameter validation and renderer command construction
- Subprocess invocation with timeouts, cancellation and admission control
- Environment-based configuration and structured logging
"""

__version__ = "1.0.0"
__author__ = "Paparazzi Team"
