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

"""Constructors for attribute descriptors.

Example:
    schema = {
        'id': uuid(),
        'email': string(required=True),
        'tags': string_set(),
        'address': obj({'city': 'string', 'zip': number()}),
    }
"""

from awslabs.dynamodb_schema.schema_definitions import (
    AttributeDescriptor,
    AttributeKind,
    DefaultProvider,
    DynamoDBType,
)
from collections.abc import Mapping
from typing import Any, Optional
from uuid import uuid1, uuid4


UUID_FORMAT = 'uuid'
BINARY_OR_STRING_FORMAT = 'binary-or-string'


def string(**options) -> AttributeDescriptor:
    """String attribute."""
    return AttributeDescriptor(kind=AttributeKind.STRING.value, **options)


def number(**options) -> AttributeDescriptor:
    """Number attribute."""
    return AttributeDescriptor(kind=AttributeKind.NUMBER.value, **options)


def boolean(**options) -> AttributeDescriptor:
    """Boolean attribute."""
    return AttributeDescriptor(kind=AttributeKind.BOOLEAN.value, **options)


def date(**options) -> AttributeDescriptor:
    """Date attribute, validated as a ``datetime``."""
    return AttributeDescriptor(kind=AttributeKind.DATE.value, **options)


def binary(**options) -> AttributeDescriptor:
    """Binary attribute."""
    return AttributeDescriptor(kind=AttributeKind.BINARY.value, **options)


def any_value(**options) -> AttributeDescriptor:
    """Attribute accepting any value, stored by its native shape."""
    return AttributeDescriptor(kind=AttributeKind.ANY.value, **options)


def array(items: Any = None, **options) -> AttributeDescriptor:
    """List attribute, optionally validating every element against ``items``."""
    item_descriptor = coerce_descriptor(items) if items is not None else None
    return AttributeDescriptor(kind=AttributeKind.ARRAY.value, items=item_descriptor, **options)


def obj(children: Optional[Mapping[str, Any]] = None, **options) -> AttributeDescriptor:
    """Object attribute with nested ``children`` declarations."""
    if children is None:
        return AttributeDescriptor(kind=AttributeKind.OBJECT.value, **options)
    return AttributeDescriptor(
        kind=AttributeKind.OBJECT.value, children=_coerce_children(children), **options
    )


def string_set(**options) -> AttributeDescriptor:
    """String set, a list of strings stored as a DynamoDB ``SS``."""
    return array(string(), dynamo_type=DynamoDBType.STRING_SET.value, **options)


def number_set(**options) -> AttributeDescriptor:
    """Number set, a list of numbers stored as a DynamoDB ``NS``."""
    return array(number(), dynamo_type=DynamoDBType.NUMBER_SET.value, **options)


def binary_set(**options) -> AttributeDescriptor:
    """Binary set, a list of binary values stored as a DynamoDB ``BS``.

    Members may also be strings, which are encoded as UTF-8 when stored.
    """
    return array(
        binary(format=BINARY_OR_STRING_FORMAT),
        dynamo_type=DynamoDBType.BINARY_SET.value,
        **options,
    )


def uuid(**options) -> AttributeDescriptor:
    """GUID string defaulting to a fresh uuid v4."""
    options.setdefault('default', DefaultProvider.from_factory(lambda: str(uuid4()), 'uuid v4'))
    return string(format=UUID_FORMAT, **options)


def time_uuid(**options) -> AttributeDescriptor:
    """GUID string defaulting to a fresh time based uuid v1."""
    options.setdefault('default', DefaultProvider.from_factory(lambda: str(uuid1()), 'uuid v1'))
    return string(format=UUID_FORMAT, **options)


def coerce_descriptor(declaration: Any) -> AttributeDescriptor:
    """Turn a declaration into an AttributeDescriptor.

    Accepts an AttributeDescriptor, a kind name such as ``'string'`` or a
    mapping of nested declarations (an object attribute). Kind names that are
    not known are kept as opaque kinds.

    Raises:
        TypeError: If the declaration has none of these shapes
    """
    if isinstance(declaration, AttributeDescriptor):
        return declaration
    if isinstance(declaration, AttributeKind):
        return AttributeDescriptor(kind=declaration.value)
    if isinstance(declaration, str):
        if not declaration:
            raise TypeError('Attribute kind cannot be empty')
        return AttributeDescriptor(kind=declaration)
    if isinstance(declaration, Mapping):
        return obj(declaration)
    raise TypeError(
        f'Unsupported attribute declaration of type {type(declaration).__name__}; '
        'use an attribute type such as string() or a kind name'
    )


def _coerce_children(children: Mapping[str, Any]) -> dict[str, AttributeDescriptor]:
    coerced = {}
    for name, declaration in children.items():
        if not isinstance(name, str):
            raise TypeError(f'Attribute names must be strings, got {name!r}')
        try:
            coerced[name] = coerce_descriptor(declaration)
        except TypeError as e:
            raise TypeError(f'{name}: {e}') from e
    return coerced
