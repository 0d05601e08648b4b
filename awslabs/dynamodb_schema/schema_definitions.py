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

"""Schema definitions and enums for DynamoDB model schemas.

This module defines the immutable building blocks the compiler produces:
attribute descriptors, default providers, index descriptors and the timestamp
policy. It is the single source of truth for the valid kinds and wire tags.
"""

import copy
import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional


DEFAULT_CREATED_AT = 'createdAt'
DEFAULT_UPDATED_AT = 'updatedAt'


class AttributeKind(Enum):
    """Structural kinds an attribute can declare."""

    STRING = 'string'
    NUMBER = 'number'
    BOOLEAN = 'boolean'
    DATE = 'date'
    BINARY = 'binary'
    ARRAY = 'array'
    OBJECT = 'object'
    ANY = 'any'


class DynamoDBType(Enum):
    """DynamoDB attribute type tags produced by the type mapper."""

    STRING = 'S'
    NUMBER = 'N'
    BINARY = 'B'
    STRING_SET = 'SS'
    NUMBER_SET = 'NS'
    BINARY_SET = 'BS'
    MAP = 'M'
    LIST = 'L'
    NULL = 'NULL'
    BOOLEAN = 'BOOL'
    DATE = 'DATE'  # Not native to DynamoDB, stored as an ISO-8601 string


SET_TYPES = frozenset(
    {DynamoDBType.STRING_SET.value, DynamoDBType.NUMBER_SET.value, DynamoDBType.BINARY_SET.value}
)


class IndexType(Enum):
    """Secondary index kinds."""

    LOCAL = 'local'
    GLOBAL = 'global'


class Presence(Enum):
    """Table-wide default presence for attributes without an explicit rule."""

    OPTIONAL = 'optional'
    REQUIRED = 'required'
    FORBIDDEN = 'forbidden'
    IGNORE = 'ignore'


def get_enum_values(enum_class) -> list[str]:
    """Get list of valid string values from enum."""
    return [item.value for item in enum_class]


def _freeze(mapping: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
    if mapping is None or isinstance(mapping, MappingProxyType):
        return mapping
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class DefaultProvider:
    """Supplies a value for a missing attribute at validation time.

    Either a literal ``value`` (deep-copied on every use) or a zero-argument
    ``factory`` invoked once per missing field per validation call.
    """

    value: Any = None
    factory: Optional[Callable[[], Any]] = None
    description: Optional[str] = None

    @classmethod
    def literal(cls, value: Any, description: Optional[str] = None) -> 'DefaultProvider':
        """Create a provider returning a copy of ``value``."""
        return cls(value=value, description=description)

    @classmethod
    def from_factory(
        cls, factory: Callable[[], Any], description: Optional[str] = None
    ) -> 'DefaultProvider':
        """Create a provider invoking ``factory`` lazily."""
        if not callable(factory):
            raise TypeError('Default factory must be callable')
        return cls(factory=factory, description=description)

    @property
    def is_deferred(self) -> bool:
        """Whether the default is computed by a factory."""
        return self.factory is not None

    def resolve(self) -> Any:
        """Produce the default value."""
        if self.factory is not None:
            return self.factory()
        return copy.deepcopy(self.value)


@dataclass(frozen=True)
class AttributeDescriptor:
    """Logical type declaration for one attribute.

    ``children`` describes the fields of an object attribute and ``items`` the
    elements of an array attribute. ``dynamo_type`` overrides the wire tag the
    kind would map to, which is how the set kinds (structurally arrays) are
    stored as native DynamoDB sets.
    """

    kind: str
    children: Optional[Mapping[str, 'AttributeDescriptor']] = None
    items: Optional['AttributeDescriptor'] = None
    dynamo_type: Optional[str] = None
    required: Optional[bool] = None  # None defers to the table presence option
    default: Any = None
    format: Optional[str] = None  # 'uuid' for GUID strings
    description: Optional[str] = None

    def __post_init__(self):
        """Freeze children and normalize the default into a DefaultProvider."""
        object.__setattr__(self, 'children', _freeze(self.children))
        if self.default is not None and not isinstance(self.default, DefaultProvider):
            if callable(self.default):
                provider = DefaultProvider.from_factory(self.default)
            else:
                provider = DefaultProvider.literal(self.default)
            object.__setattr__(self, 'default', provider)

    @property
    def is_object(self) -> bool:
        """Whether this is an object attribute with declared children."""
        return self.kind == AttributeKind.OBJECT.value and self.children is not None

    def keys(self, extra: Mapping[str, 'AttributeDescriptor']) -> 'AttributeDescriptor':
        """Return a copy of this object descriptor extended with ``extra`` children.

        Children in ``extra`` replace existing children with the same name.
        """
        if self.kind != AttributeKind.OBJECT.value:
            raise TypeError(f"Cannot add keys to a '{self.kind}' attribute")
        children = dict(self.children or {})
        children.update(extra)
        return dataclasses.replace(self, children=children)

    def replace(self, **changes) -> 'AttributeDescriptor':
        """Return a copy with ``changes`` applied."""
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class IndexDescriptor:
    """A validated secondary index.

    Local indexes always carry the table hash key and a range key and never
    carry capacities. Global indexes carry their own hash key.
    """

    name: str
    type: str
    hash_key: str
    range_key: Optional[str] = None
    projection: Optional[Mapping[str, Any]] = None
    read_capacity: Optional[int] = None
    write_capacity: Optional[int] = None

    def __post_init__(self):
        """Freeze the projection mapping."""
        object.__setattr__(self, 'projection', _freeze(self.projection))

    @property
    def is_local(self) -> bool:
        """Whether this is a local secondary index."""
        return self.type == IndexType.LOCAL.value

    @property
    def is_global(self) -> bool:
        """Whether this is a global secondary index."""
        return self.type == IndexType.GLOBAL.value

    def to_dict(self) -> dict[str, Any]:
        """Shape handed to table DDL collaborators.

        Global indexes surface their own keys and capacity pair; local indexes
        surface their range key and projection and inherit table capacity.
        """
        data: dict[str, Any] = {'name': self.name, 'type': self.type}
        if self.is_global:
            data['hashKey'] = self.hash_key
        if self.range_key is not None:
            data['rangeKey'] = self.range_key
        if self.projection is not None:
            data['projection'] = dict(self.projection)
        if self.is_global:
            if self.read_capacity is not None:
                data['readCapacity'] = self.read_capacity
            if self.write_capacity is not None:
                data['writeCapacity'] = self.write_capacity
        return data


@dataclass(frozen=True)
class TimestampPolicy:
    """Which timestamp attributes the compiler injects.

    A field name of ``None`` means that timestamp is suppressed.
    """

    enabled: bool = False
    created_at: Optional[str] = DEFAULT_CREATED_AT
    updated_at: Optional[str] = DEFAULT_UPDATED_AT

    @classmethod
    def from_config(
        cls,
        enabled: bool,
        created_at: Optional[str | bool] = None,
        updated_at: Optional[str | bool] = None,
    ) -> 'TimestampPolicy':
        """Resolve the ``createdAt``/``updatedAt`` settings.

        A string renames the field, ``False`` suppresses it and anything else
        keeps the default name.
        """
        return cls(
            enabled=bool(enabled),
            created_at=_timestamp_field_name(created_at, DEFAULT_CREATED_AT),
            updated_at=_timestamp_field_name(updated_at, DEFAULT_UPDATED_AT),
        )

    @property
    def field_names(self) -> list[str]:
        """Names of the timestamp attributes injected into the schema."""
        if not self.enabled:
            return []
        return [name for name in (self.created_at, self.updated_at) if name is not None]


def _timestamp_field_name(setting: Optional[str | bool], default: str) -> Optional[str]:
    if setting is False:
        return None
    if isinstance(setting, str) and setting:
        return setting
    return default
