# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logical attribute kinds to DynamoDB wire type tags."""

from awslabs.dynamodb_schema.schema_definitions import (
    AttributeDescriptor,
    AttributeKind,
    DynamoDBType,
)
from collections.abc import Mapping
from loguru import logger
from types import MappingProxyType
from typing import Any, Optional


KIND_TO_DYNAMO_TYPE: Mapping[str, str] = MappingProxyType(
    {
        AttributeKind.STRING.value: DynamoDBType.STRING.value,
        AttributeKind.DATE.value: DynamoDBType.DATE.value,
        AttributeKind.NUMBER.value: DynamoDBType.NUMBER.value,
        AttributeKind.BOOLEAN.value: DynamoDBType.BOOLEAN.value,
        AttributeKind.BINARY.value: DynamoDBType.BINARY.value,
        AttributeKind.ARRAY.value: DynamoDBType.LIST.value,
    }
)

# Kinds that deliberately have no wire type of their own
_OPAQUE_KINDS = frozenset({AttributeKind.ANY.value, AttributeKind.OBJECT.value})


class TypeMapper:
    """Maps attribute descriptor trees to trees of DynamoDB wire type tags.

    Leaves map to a single tag, object attributes map to nested tag mappings of
    the same shape. Kinds without a tag map to ``None``, which serializers treat
    as "encode by the value's native shape".
    """

    def __init__(self):
        """Initialize the mapper with the fixed kind table."""
        self.mapping = KIND_TO_DYNAMO_TYPE

    def map_type(self, descriptor: AttributeDescriptor) -> Optional[str]:
        """Map a leaf descriptor to its wire tag, honoring a dynamo_type override."""
        if descriptor.dynamo_type:
            return descriptor.dynamo_type

        tag = self.mapping.get(descriptor.kind)
        if tag is None and descriptor.kind not in _OPAQUE_KINDS:
            logger.debug(f"No wire type for attribute kind '{descriptor.kind}', passing through")
        return tag

    def map_attribute(self, descriptor: AttributeDescriptor) -> Any:
        """Map one attribute, recursing into object attributes."""
        if descriptor.is_object:
            return self.map_schema(descriptor.children)
        return self.map_type(descriptor)

    def map_schema(
        self, schema: Mapping[str, AttributeDescriptor] | AttributeDescriptor
    ) -> Mapping[str, Any]:
        """Map every field of a logical schema.

        Args:
            schema: Field name to descriptor mapping, or an object descriptor whose
                children are the fields

        Returns:
            Read-only mapping of field name to tag (or nested tag mapping)
        """
        if isinstance(schema, AttributeDescriptor):
            if not schema.is_object:
                raise TypeError('Only object attributes can be mapped as a schema')
            schema = schema.children

        return MappingProxyType(
            {name: self.map_attribute(descriptor) for name, descriptor in schema.items()}
        )


def map_attribute_types(
    schema: Mapping[str, AttributeDescriptor] | AttributeDescriptor,
) -> Mapping[str, Any]:
    """Quick function to map a logical schema to wire type tags."""
    return TypeMapper().map_schema(schema)
