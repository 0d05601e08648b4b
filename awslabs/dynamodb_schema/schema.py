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

"""The compiled, immutable schema descriptor."""

from awslabs.dynamodb_schema.config import ValidationOptions
from awslabs.dynamodb_schema.errors import RecordValidationError
from awslabs.dynamodb_schema.logging_config import LogSink, default_log_sink
from awslabs.dynamodb_schema.record_validator import DEFAULT_FAILED, RecordValidator
from awslabs.dynamodb_schema.schema_definitions import (
    AttributeDescriptor,
    IndexDescriptor,
    TimestampPolicy,
)
from awslabs.dynamodb_schema.validation_utils import ValidationResult
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class SchemaDescriptor:
    """Compiled model schema.

    Created once per model definition by ``compile_schema`` and never mutated.
    Storage collaborators read the key names, indexes and ``attribute_type_map``;
    ``validate`` and ``apply_defaults`` run records through the logical schema.
    """

    hash_key: str
    range_key: Optional[str]
    table_name: Optional[Union[str, Callable[[], str]]]
    timestamps: TimestampPolicy
    local_indexes: Mapping[str, IndexDescriptor]
    global_indexes: Mapping[str, IndexDescriptor]
    logical_schema: Mapping[str, AttributeDescriptor]
    attribute_type_map: Mapping[str, Any]
    validation_options: ValidationOptions = field(default_factory=ValidationOptions)
    log: LogSink = field(default_factory=default_log_sink, compare=False)

    @property
    def key_attributes(self) -> tuple[str, ...]:
        """Primary key attribute names, hash key first."""
        if self.range_key:
            return (self.hash_key, self.range_key)
        return (self.hash_key,)

    @property
    def indexes(self) -> dict[str, IndexDescriptor]:
        """All secondary indexes keyed by name."""
        return {**self.local_indexes, **self.global_indexes}

    def resolve_table_name(self, fallback: Optional[str] = None) -> str:
        """Resolve the table name.

        A callable table name is invoked with no arguments. Without a configured
        table name the ``fallback`` (usually the model name) is used.

        Raises:
            TypeError: If a callable table name does not return a string
            ValueError: If no table name is configured and no fallback given
        """
        if callable(self.table_name):
            name = self.table_name()
            if not isinstance(name, str):
                raise TypeError(
                    f'table_name callable must return a string, got {type(name).__name__}'
                )
            return name
        if self.table_name:
            return self.table_name
        if fallback:
            return fallback
        raise ValueError('No table name configured and no fallback provided')

    def validate(
        self,
        record: Any,
        options: Optional[Union[ValidationOptions, Mapping[str, Any]]] = None,
        raise_on_error: bool = False,
    ) -> ValidationResult:
        """Validate a record against the logical schema.

        Args:
            record: Candidate record
            options: Overrides of the table validation options for this call only
            raise_on_error: Raise RecordValidationError instead of returning errors

        Returns:
            ValidationResult with the coerced, defaulted ``value`` and ``errors``

        Raises:
            RecordValidationError: If raise_on_error is set and the record is invalid
            SchemaConfigurationError: If ``options`` holds an unknown option or bad value
        """
        resolved = self.validation_options.merge(options)
        result = RecordValidator(self.logical_schema, resolved).validate(record)

        if raise_on_error and not result.is_valid:
            raise RecordValidationError(result.errors, result.value)
        return result

    def apply_defaults(self, record: Any) -> Any:
        """Fill defaults and coerce values, discarding validation detail.

        Intended for write paths that proceed optimistically. Validation errors are
        reported through ``log.warn``; a failing default generator is raised.

        Raises:
            RecordValidationError: If a default value generator failed
        """
        result = self.validate(record, {'abort_early': False})

        generator_errors = result.errors_with_code(DEFAULT_FAILED)
        if generator_errors:
            raise RecordValidationError(generator_errors, result.value)
        if not result.is_valid:
            self.log.warn(
                f'Applied defaults to a record with {len(result.errors)} validation error(s): '
                + '; '.join(f'{error.path}: {error.message}' for error in result.errors)
            )
        return result.value
