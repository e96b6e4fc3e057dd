"""Core infrastructure package for shared application functionality.

This package provides the foundational components used across all layers
of the User Service:

- **config**: Centralized configuration management with environment support
- **context**: Request context and correlation ID management
- **exceptions**: Closed exception hierarchy with error codes
- **error_context**: Sensitive data sanitization for safe logging
- **logging**: Structured logging built on Loguru
"""
