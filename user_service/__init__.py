"""User Service: a FastAPI CRUD API for the user resource."""
