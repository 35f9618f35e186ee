"""Post-build check that every root field was wrapped by operation hooks."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING

from graphql import GraphQLObjectType, GraphQLSchema

from ophooks.hooks.errors import ValidationError

if TYPE_CHECKING:
    from ophooks.schema.builder import FieldRecord

logger = logging.getLogger(__name__)


def root_types(schema: GraphQLSchema) -> list[GraphQLObjectType]:
    """Return the schema's query, mutation and subscription types that exist."""
    return [
        t
        for t in (schema.query_type, schema.mutation_type, schema.subscription_type)
        if t is not None
    ]


def find_unwrapped_fields(
    schema: GraphQLSchema, records: Mapping[str, FieldRecord]
) -> list[str]:
    """List root fields (as ``Type.field``) without a wrapped record."""
    missing: list[str] = []
    for root_type in root_types(schema):
        for field_name in root_type.fields:
            identifier = f"{root_type.name}.{field_name}"
            record = records.get(identifier)
            if record is None or not record.wrapped:
                missing.append(identifier)
    return missing


def validate_wrapped(
    schema: GraphQLSchema, records: Mapping[str, FieldRecord]
) -> GraphQLSchema:
    """Ensure every root field was wrapped.

    Raises:
        ValidationError: Listing every unwrapped root field
    """
    missing = find_unwrapped_fields(schema, records)
    if missing:
        logger.error(
            "Operation hooks missing on %d root field(s): %s",
            len(missing),
            ", ".join(missing),
        )
        raise ValidationError(missing)
    return schema
