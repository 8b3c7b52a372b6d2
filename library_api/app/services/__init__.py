"""
Service layer.

Each service encapsulates the business logic for one concern and
receives the persistence gateway it works with, so the API layer
never touches the store directly.
"""
