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

"""Secondary index validation for model schemas.

Each declaration is checked by the model for its kind (``LocalIndexConfig`` or
``GlobalIndexConfig``). The local index hash key rule depends on the table hash
key, which is passed in explicitly rather than read from validation context.
"""

from awslabs.dynamodb_schema.config import (
    GlobalIndexConfig,
    IndexConfig,
    LocalIndexConfig,
    pydantic_errors,
)
from awslabs.dynamodb_schema.schema_definitions import IndexDescriptor, IndexType
from awslabs.dynamodb_schema.validation_utils import ValidationError
from collections.abc import Mapping
from dataclasses import dataclass, field
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from types import MappingProxyType
from typing import Any, Optional


_INDEX_ADAPTER = TypeAdapter(IndexConfig)


@dataclass
class IndexPartition:
    """Validated indexes grouped by kind, plus every violation found."""

    local_indexes: Mapping[str, IndexDescriptor] = field(default_factory=dict)
    global_indexes: Mapping[str, IndexDescriptor] = field(default_factory=dict)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Whether every declaration passed validation."""
        return not self.errors


class IndexRegistry:
    """Validator for secondary index declarations.

    Provides:
    - per-kind structural validation (local vs. global rules)
    - local hash key consistency with the table hash key
    - index name uniqueness across both kinds
    """

    def validate_index(
        self, declaration: Any, hash_key: Optional[str], path: str
    ) -> tuple[Optional[IndexDescriptor], list[ValidationError]]:
        """Validate a single index declaration.

        Args:
            declaration: Raw index declaration
            hash_key: Table hash key, None when the table config itself is invalid
            path: Path context for error reporting

        Returns:
            The descriptor (None when invalid) and the errors found
        """
        if not isinstance(declaration, Mapping):
            return None, [
                ValidationError(
                    path=path,
                    message='Index declaration must be a mapping',
                    suggestion='Declare indexes as {"name": ..., "type": "local"|"global", ...}',
                )
            ]

        try:
            parsed = _INDEX_ADAPTER.validate_python(declaration)
        except PydanticValidationError as e:
            return None, pydantic_errors(e, path)

        if isinstance(parsed, LocalIndexConfig):
            return self._local_descriptor(parsed, hash_key, path)
        return self._global_descriptor(parsed), []

    def _local_descriptor(
        self, parsed: LocalIndexConfig, hash_key: Optional[str], path: str
    ) -> tuple[Optional[IndexDescriptor], list[ValidationError]]:
        if hash_key is None:
            return None, []

        if parsed.hash_key is not None and parsed.hash_key != hash_key:
            return None, [
                ValidationError(
                    path=f'{path}.hashKey',
                    message=(
                        f"Local index hash key '{parsed.hash_key}' must match "
                        f"the table hash key '{hash_key}'"
                    ),
                    suggestion='Omit hashKey on local indexes or set it to the table hash key',
                )
            ]

        descriptor = IndexDescriptor(
            name=parsed.name,
            type=IndexType.LOCAL.value,
            hash_key=hash_key,
            range_key=parsed.range_key,
            projection=parsed.projection,
        )
        return descriptor, []

    def _global_descriptor(self, parsed: GlobalIndexConfig) -> IndexDescriptor:
        return IndexDescriptor(
            name=parsed.name,
            type=IndexType.GLOBAL.value,
            hash_key=parsed.hash_key,
            range_key=parsed.range_key,
            projection=parsed.projection,
            read_capacity=parsed.read_capacity,
            write_capacity=parsed.write_capacity,
        )

    def validate_index_names_unique(
        self, declarations: list[Any], path: str = 'indexes'
    ) -> list[ValidationError]:
        """Ensure index names are unique across local and global indexes.

        Args:
            declarations: Raw index declarations
            path: Path context for error reporting

        Returns:
            List of ValidationError objects for duplicate index names
        """
        errors = []
        seen_names: set[str] = set()

        for i, declaration in enumerate(declarations):
            if not isinstance(declaration, Mapping):
                continue

            name = declaration.get('name')
            if not isinstance(name, str) or not name:
                continue

            if name in seen_names:
                errors.append(
                    ValidationError(
                        path=f'{path}[{i}].name',
                        message=f"Duplicate index name '{name}'",
                        suggestion=(
                            'Index names must be unique across local and global indexes. '
                            f"Choose a different name for index '{name}'"
                        ),
                    )
                )
            else:
                seen_names.add(name)

        return errors

    def build(
        self, declarations: Optional[list[Any]], hash_key: Optional[str], path: str = 'indexes'
    ) -> IndexPartition:
        """Validate every declaration and partition the valid ones by kind.

        Args:
            declarations: Raw index declarations, None when no indexes are declared
            hash_key: Table hash key
            path: Path context for error reporting

        Returns:
            IndexPartition with read-only local/global mappings keyed by name
        """
        partition = IndexPartition()
        if not declarations:
            partition.local_indexes = MappingProxyType({})
            partition.global_indexes = MappingProxyType({})
            return partition

        local_indexes: dict[str, IndexDescriptor] = {}
        global_indexes: dict[str, IndexDescriptor] = {}

        for i, declaration in enumerate(declarations):
            descriptor, errors = self.validate_index(declaration, hash_key, f'{path}[{i}]')
            partition.errors.extend(errors)
            if descriptor is None:
                continue
            target = local_indexes if descriptor.is_local else global_indexes
            target.setdefault(descriptor.name, descriptor)

        partition.errors.extend(self.validate_index_names_unique(declarations, path))
        partition.local_indexes = MappingProxyType(local_indexes)
        partition.global_indexes = MappingProxyType(global_indexes)
        return partition
