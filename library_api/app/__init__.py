"""
Application package.

``core`` holds configuration, logging, security helpers, errors and the
persistence gateway; ``schemas`` the pydantic models; ``services`` the
catalog, auth and query logic; ``graphql`` the API surface served by
``main``.
"""
