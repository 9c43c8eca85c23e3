"""
FastAPI REST Endpoints
======================

HTTP access to the renderer.

Endpoints:
- GET /: Render an image from query parameters
- GET /health: Renderer availability and render queue occupancy
"""
