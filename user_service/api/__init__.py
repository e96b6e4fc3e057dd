"""HTTP API layer built on FastAPI.

Key components:
- **main**: Application factory and lifecycle management
- **routes**: The ``/users`` CRUD router
- **validation**: Body decoding and input validation guards
- **middleware**: Correlation IDs, request logging and exception handlers
- **schemas**: Pydantic response models
- **utils**: orjson response class
"""
