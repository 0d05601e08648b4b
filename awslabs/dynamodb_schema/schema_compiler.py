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

"""Schema compilation: configuration in, immutable SchemaDescriptor out.

The steps run in a fixed order:

1. validate the top-level configuration shape
2. validate and partition secondary indexes against the table hash key
3. build the base logical schema from the attribute declarations
4. inject timestamp attributes when enabled
5. derive the attribute type map from the final logical schema

Timestamps must be injected before the type map is derived, otherwise they
would be missing from ``attribute_type_map``.
"""

from awslabs.dynamodb_schema.attribute_types import coerce_descriptor
from awslabs.dynamodb_schema.config import SchemaConfig, pydantic_errors
from awslabs.dynamodb_schema.errors import SchemaConfigurationError
from awslabs.dynamodb_schema.index_registry import IndexRegistry
from awslabs.dynamodb_schema.schema import SchemaDescriptor
from awslabs.dynamodb_schema.schema_definitions import AttributeDescriptor, TimestampPolicy
from awslabs.dynamodb_schema.timestamps import apply_timestamps
from awslabs.dynamodb_schema.type_mapper import TypeMapper
from awslabs.dynamodb_schema.validation_utils import ValidationResult
from collections.abc import Mapping
from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from types import MappingProxyType
from typing import Any, Optional


class SchemaCompiler:
    """Compiles model configurations into SchemaDescriptors.

    Holds no per-compile state, so one compiler can be shared.
    """

    def __init__(self):
        """Initialize the compiler with its index registry and type mapper."""
        self.index_registry = IndexRegistry()
        self.type_mapper = TypeMapper()

    def compile(self, config: Mapping[str, Any]) -> SchemaDescriptor:
        """Compile a model configuration.

        Args:
            config: Model configuration mapping

        Returns:
            The immutable SchemaDescriptor

        Raises:
            SchemaConfigurationError: With every structural violation found
        """
        result = ValidationResult()

        if not isinstance(config, Mapping):
            result.add_error(
                'config', 'Schema config must be a mapping', 'Pass the config as a dict'
            )
            raise SchemaConfigurationError(result.errors)

        parsed = self._validate_config(config, result)
        hash_key = parsed.hash_key if parsed else _raw_string(config, 'hash_key')

        declarations = parsed.indexes if parsed else _raw_value(config, 'indexes')
        if declarations is not None and not isinstance(declarations, list):
            # Already reported by the config model
            declarations = None
        partition = self.index_registry.build(declarations, hash_key)
        result.add_errors(partition.errors)

        attributes = parsed.attributes if parsed else _raw_value(config, 'schema')
        logical_schema = self._build_logical_schema(attributes, result)

        if not result.is_valid:
            raise SchemaConfigurationError(result.errors)

        policy = TimestampPolicy.from_config(
            parsed.timestamps, parsed.created_at, parsed.updated_at
        )
        logical_schema = apply_timestamps(logical_schema, policy)
        attribute_type_map = self.type_mapper.map_schema(logical_schema)

        descriptor = SchemaDescriptor(
            hash_key=parsed.hash_key,
            range_key=parsed.range_key,
            table_name=parsed.table_name,
            timestamps=policy,
            local_indexes=partition.local_indexes,
            global_indexes=partition.global_indexes,
            logical_schema=MappingProxyType(logical_schema),
            attribute_type_map=attribute_type_map,
            validation_options=parsed.validation,
            log=parsed.log,
        )

        logger.debug(
            f"Compiled schema with hash key '{descriptor.hash_key}': "
            f'{len(logical_schema)} attribute(s), {len(descriptor.local_indexes)} local and '
            f'{len(descriptor.global_indexes)} global index(es)'
        )
        return descriptor

    def _validate_config(
        self, config: Mapping[str, Any], result: ValidationResult
    ) -> Optional[SchemaConfig]:
        try:
            return SchemaConfig.model_validate(dict(config))
        except PydanticValidationError as e:
            result.add_errors(pydantic_errors(e))
            return None

    def _build_logical_schema(
        self, attributes: Any, result: ValidationResult, path: str = 'schema'
    ) -> dict[str, AttributeDescriptor]:
        """Build the field name to descriptor mapping from the declarations."""
        if attributes is None:
            return {}

        # A top-level object wrapper is unwrapped to its children
        if isinstance(attributes, AttributeDescriptor) and attributes.is_object:
            attributes = attributes.children

        # Any other shape is reported by the config model
        if not isinstance(attributes, Mapping):
            return {}

        logical_schema = {}
        for name, declaration in attributes.items():
            if not isinstance(name, str) or not name:
                result.add_error(
                    path, f'Attribute name {name!r} must be a non-empty string', code='schema.key'
                )
                continue
            try:
                logical_schema[name] = coerce_descriptor(declaration)
            except TypeError as e:
                result.add_error(
                    f'{path}.{name}',
                    str(e),
                    'Declare the attribute with an attribute type such as string()',
                    code='schema.attribute',
                )
        return logical_schema


def _raw_value(config: Mapping[str, Any], field_name: str) -> Any:
    if field_name in config:
        return config[field_name]
    return config.get(to_camel(field_name))


def _raw_string(config: Mapping[str, Any], field_name: str) -> Optional[str]:
    value = _raw_value(config, field_name)
    return value if isinstance(value, str) and value else None


def compile_schema(config: Mapping[str, Any]) -> SchemaDescriptor:
    """Compile a model configuration into a SchemaDescriptor."""
    return SchemaCompiler().compile(config)
