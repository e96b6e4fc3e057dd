"""FastAPI middleware package for cross-cutting request/response concerns.

- **RequestContextMiddleware**: Manages correlation IDs and request context
- **RequestLoggingMiddleware**: Request logging with timing
- **error_handler**: Exception handlers mapping failures to JSON error bodies

Middleware execute in reverse order of registration; see ``api.main``.
"""
