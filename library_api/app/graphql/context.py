"""
Per-request GraphQL context.

The context is built by a FastAPI dependency so it can reuse FastAPI's
``HTTPBearer`` scheme to read the ``Authorization`` header.  It wires
fresh service instances around the application's gateway and keeps
the bearer token (if any) for the auth gate and ``me``.
"""

from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from graphql import GraphQLError
from strawberry.fastapi import BaseContext

from ..core.config import Settings
from ..core.db import SQLiteGateway
from ..core.errors import LibraryError
from ..services.auth_service import AuthService
from ..services.catalog_service import CatalogService
from ..services.query_service import QueryService

security = HTTPBearer(auto_error=False)


class LibraryContext(BaseContext):
    def __init__(self, gateway: SQLiteGateway, settings: Settings, token: Optional[str] = None) -> None:
        super().__init__()
        self.settings = settings
        self.token = token
        self.catalog = CatalogService(gateway)
        self.auth = AuthService(gateway, settings)
        self.queries = QueryService(gateway, self.catalog)

    @property
    def identity(self) -> Optional[Dict[str, Any]]:
        """Claims of the bearer token, or ``None`` for anonymous requests."""
        return self.auth.identify(self.token)

    def authorize_mutation(self, token: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """Run the token gate for a mutation.

        A token passed as a mutation argument takes precedence over the
        ``Authorization`` header.  When the gate is disabled in the
        settings the mutation runs for anyone.
        """
        if not self.settings.require_token_for_mutations:
            return None
        return self.auth.require_token(token or self.token)


def graphql_error(exc: LibraryError) -> GraphQLError:
    """Translate a service failure into a GraphQL error with extensions."""
    return GraphQLError(
        exc.message,
        original_error=exc,
        extensions={"code": exc.code, "invalidArgs": exc.invalid_args},
    )


def get_gateway(request: Request) -> SQLiteGateway:
    return request.app.state.gateway


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_context(
    gateway: SQLiteGateway = Depends(get_gateway),
    app_settings: Settings = Depends(get_settings),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> LibraryContext:
    token = credentials.credentials if credentials is not None else None
    return LibraryContext(gateway, app_settings, token)
