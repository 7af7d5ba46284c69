"""API route handlers for demo-service.

Routes:
- root: every path, any method
"""

__all__: list[str] = []
