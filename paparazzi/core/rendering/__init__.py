"""
Rendering Module
===============

Query-to-renderer pipeline.

Components:
- parameters: Query parameter validation
- command: Renderer argument vector construction
- invoker: Subprocess execution with timeout and cancellation
- artifact: Request-scoped output files
- render_queue: Admission control for renderer processes
- dispatcher: End-to-end request pipeline
"""
