"""
GraphQL schema assembled from the per-service Query and Mutation types.

Each service owns `driving_adapter/graphql/{types,resolvers}.py`; this module only merges
them and attaches the error extension.
"""

import strawberry
from strawberry.fastapi import GraphQLRouter
from strawberry.tools import merge_types

from src.platform.graphql.context import get_graphql_context
from src.platform.graphql.errors import ErrorCodeExtension
from src.service.cabin.driving_adapter.graphql.resolvers import CabinMutation, CabinQuery
from src.service.document.driving_adapter.graphql.resolvers import (
    DocumentMutation,
    DocumentQuery,
)
from src.service.event.driving_adapter.graphql.resolvers import EventMutation, EventQuery
from src.service.file.driving_adapter.graphql.resolvers import FileMutation
from src.service.listing.driving_adapter.graphql.resolvers import ListingMutation, ListingQuery
from src.service.organization.driving_adapter.graphql.resolvers import (
    OrganizationMutation,
    OrganizationQuery,
)
from src.service.product.driving_adapter.graphql.resolvers import ProductMutation, ProductQuery
from src.service.user.driving_adapter.graphql.resolvers import UserMutation, UserQuery


Query = merge_types(
    'Query',
    (
        UserQuery,
        OrganizationQuery,
        EventQuery,
        CabinQuery,
        DocumentQuery,
        ListingQuery,
        ProductQuery,
    ),
)

Mutation = merge_types(
    'Mutation',
    (
        UserMutation,
        OrganizationMutation,
        EventMutation,
        CabinMutation,
        DocumentMutation,
        FileMutation,
        ListingMutation,
        ProductMutation,
    ),
)

schema = strawberry.Schema(query=Query, mutation=Mutation, extensions=[ErrorCodeExtension])


def create_graphql_router() -> GraphQLRouter:
    return GraphQLRouter(schema, context_getter=get_graphql_context)
