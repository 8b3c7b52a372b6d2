"""
GraphQL package.

Builds the strawberry schema from the query and mutation resolvers and
exposes a FastAPI router serving it.  All catalog operations go through
this single endpoint.
"""

import strawberry
from strawberry.fastapi import GraphQLRouter

from .context import get_context
from .mutations import Mutation
from .queries import Query

schema = strawberry.Schema(query=Query, mutation=Mutation)


def create_graphql_router(debug: bool = False) -> GraphQLRouter:
    """Create the GraphQL router; the GraphiQL IDE is only served in debug mode."""
    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if debug else None,
    )


__all__ = ["schema", "create_graphql_router"]
