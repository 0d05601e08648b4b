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

"""Record validation against a compiled logical schema.

The validator walks the attribute descriptor tree itself. Leaf values are
checked and, when ``convert`` is on, coerced with pydantic type adapters in lax
mode (``'42'`` becomes ``42``, ISO strings become ``datetime``); with
``convert`` off the adapters run in strict mode. Booleans only accept
``True``/``False``, plus the strings ``'true'``/``'false'`` when converting.
"""

import uuid
from awslabs.dynamodb_schema.attribute_types import BINARY_OR_STRING_FORMAT, UUID_FORMAT
from awslabs.dynamodb_schema.config import ValidationOptions
from awslabs.dynamodb_schema.schema_definitions import (
    AttributeDescriptor,
    AttributeKind,
    Presence,
    get_enum_values,
)
from awslabs.dynamodb_schema.validation_utils import ValidationResult
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from pydantic import AllowInfNan, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from typing import Annotated, Any, Optional, Union


ROOT_PATH = 'value'

# Error codes
ANY_REQUIRED = 'any.required'
ANY_UNKNOWN = 'any.unknown'
ANY_NULL = 'any.null'
OBJECT_BASE = 'object.base'
OBJECT_UNKNOWN = 'object.unknown'
ARRAY_BASE = 'array.base'
BOOLEAN_BASE = 'boolean.base'
STRING_GUID = 'string.guid'
DEFAULT_FAILED = 'any.default'

_LEAF_ADAPTERS: dict[str, TypeAdapter] = {
    AttributeKind.STRING.value: TypeAdapter(str),
    AttributeKind.NUMBER.value: TypeAdapter(
        Union[int, Annotated[float, AllowInfNan(False)], Annotated[Decimal, AllowInfNan(False)]]
    ),
    AttributeKind.DATE.value: TypeAdapter(datetime),
    AttributeKind.BINARY.value: TypeAdapter(bytes),
}

_KNOWN_KINDS = frozenset(get_enum_values(AttributeKind))
_COLLECTION_TYPES = (list, tuple, set, frozenset)
_BOOLEAN_STRINGS = frozenset({'true', 'false'})


class _AbortValidation(Exception):
    """Stops the walk after the first error when abort_early is set."""


def _join(path: str, name: str) -> str:
    return f'{path}.{name}' if path else name


def _is_guid(value: Any) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


class RecordValidator:
    """Validates and defaults records for one logical schema.

    Instances are cheap and hold no state beyond the schema and the resolved
    options, so one is created per validation call.
    """

    def __init__(
        self,
        schema: Mapping[str, AttributeDescriptor],
        options: Optional[ValidationOptions] = None,
    ):
        """Initialize the validator.

        Args:
            schema: Field name to descriptor mapping
            options: Resolved validation options
        """
        self.schema = schema
        self.options = options or ValidationOptions()

    def validate(self, record: Any) -> ValidationResult:
        """Validate a record.

        Args:
            record: Candidate record

        Returns:
            ValidationResult whose ``value`` is the coerced and defaulted record
            and whose ``errors`` lists every violation (only the first one when
            ``abort_early`` is set)
        """
        result = ValidationResult()

        if not isinstance(record, Mapping):
            result.add_error(
                ROOT_PATH, 'Record must be a mapping', 'Pass the record as a dict', OBJECT_BASE
            )
            result.value = record
            return result

        output: dict[str, Any] = {}
        try:
            self._validate_object(self.schema, record, '', result, output)
        except _AbortValidation:
            # Top-level attributes checked before the stop keep their coerced
            # values, the rest stay as given
            partial = dict(record)
            partial.update(output)
            output = partial

        result.value = output
        return result

    def _report(
        self,
        result: ValidationResult,
        path: str,
        message: str,
        suggestion: str = '',
        code: Optional[str] = None,
    ) -> None:
        result.add_error(path or ROOT_PATH, message, suggestion, code)
        if self.options.abort_early:
            raise _AbortValidation()

    def _presence(self, descriptor: AttributeDescriptor) -> str:
        if descriptor.required is True:
            return Presence.REQUIRED.value
        if descriptor.required is False:
            return Presence.OPTIONAL.value
        if self.options.presence == Presence.IGNORE.value:
            return Presence.OPTIONAL.value
        return self.options.presence

    def _validate_object(
        self,
        children: Mapping[str, AttributeDescriptor],
        data: Mapping[str, Any],
        path: str,
        result: ValidationResult,
        output: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        if output is None:
            output = {}

        for name, descriptor in children.items():
            field_path = _join(path, name)
            presence = self._presence(descriptor)

            if presence == Presence.FORBIDDEN.value:
                if name in data:
                    self._report(
                        result,
                        field_path,
                        f'"{field_path}" is not allowed',
                        'Remove this attribute',
                        ANY_UNKNOWN,
                    )
                continue

            if name in data:
                output[name] = self._validate_value(descriptor, data[name], field_path, result)
            elif descriptor.default is not None and not self.options.no_defaults:
                self._apply_default(descriptor, name, field_path, output, result)
            elif presence == Presence.REQUIRED.value:
                self._report(
                    result,
                    field_path,
                    f'"{field_path}" is required',
                    'Provide a value for this attribute',
                    ANY_REQUIRED,
                )

        for key, value in data.items():
            if key in children or self.options.strip_unknown:
                continue
            if self.options.allow_unknown:
                output[key] = value
                continue
            key_path = _join(path, str(key))
            self._report(
                result,
                key_path,
                f'"{key_path}" is not allowed',
                'Remove the attribute or declare it in the schema',
                OBJECT_UNKNOWN,
            )

        return output

    def _apply_default(
        self,
        descriptor: AttributeDescriptor,
        name: str,
        path: str,
        output: dict[str, Any],
        result: ValidationResult,
    ) -> None:
        try:
            value = descriptor.default.resolve()
        except Exception as e:
            self._report(
                result,
                path,
                f'Default value for "{path}" failed: {e}',
                'Fix the default value generator',
                DEFAULT_FAILED,
            )
            return

        if descriptor.is_object and isinstance(value, Mapping):
            value = self._validate_object(descriptor.children, value, path, result)
        output[name] = value

    def _validate_value(
        self, descriptor: AttributeDescriptor, value: Any, path: str, result: ValidationResult
    ) -> Any:
        kind = descriptor.kind

        if value is None:
            if kind == AttributeKind.ANY.value or kind not in _KNOWN_KINDS:
                return None
            self._report(
                result,
                path,
                f'"{path}" must not be None',
                'Omit the attribute instead of setting it to None',
                ANY_NULL,
            )
            return value

        if kind == AttributeKind.OBJECT.value:
            if not isinstance(value, Mapping):
                self._report(result, path, f'"{path}" must be an object', code=OBJECT_BASE)
                return value
            if descriptor.children is None:
                return dict(value)
            return self._validate_object(descriptor.children, value, path, result)

        if kind == AttributeKind.ARRAY.value:
            return self._validate_array(descriptor, value, path, result)

        if kind == AttributeKind.BOOLEAN.value:
            return self._validate_boolean(value, path, result)

        adapter = _LEAF_ADAPTERS.get(kind)
        if adapter is None:
            # any, or a kind this engine has no opinion about
            return value

        return self._validate_leaf(descriptor, adapter, value, path, result)

    def _validate_array(
        self, descriptor: AttributeDescriptor, value: Any, path: str, result: ValidationResult
    ) -> Any:
        if not isinstance(value, _COLLECTION_TYPES):
            self._report(result, path, f'"{path}" must be an array', code=ARRAY_BASE)
            return value

        items = list(value)
        if descriptor.items is None:
            return items
        return [
            self._validate_value(descriptor.items, item, f'{path}[{i}]', result)
            for i, item in enumerate(items)
        ]

    def _validate_leaf(
        self,
        descriptor: AttributeDescriptor,
        adapter: TypeAdapter,
        value: Any,
        path: str,
        result: ValidationResult,
    ) -> Any:
        kind = descriptor.kind
        code = f'{kind}.base'

        # bool is an int subclass, reject it explicitly
        if kind == AttributeKind.NUMBER.value and isinstance(value, bool):
            self._report(result, path, f'"{path}" must be a number', code=code)
            return value

        if (
            descriptor.format == BINARY_OR_STRING_FORMAT
            and isinstance(value, str)
            and not self.options.convert
        ):
            return value

        try:
            coerced = adapter.validate_python(value, strict=not self.options.convert)
        except PydanticValidationError as e:
            reason = e.errors()[0].get('msg', '')
            suggestion = '' if self.options.convert else 'Enable convert to coerce values'
            self._report(result, path, f'"{path}" must be a {kind}. {reason}', suggestion, code)
            return value

        if descriptor.format == UUID_FORMAT and not _is_guid(coerced):
            self._report(result, path, f'"{path}" must be a valid GUID', code=STRING_GUID)
            return value

        return coerced

    def _validate_boolean(self, value: Any, path: str, result: ValidationResult) -> Any:
        """Accept booleans, plus ``'true'``/``'false'`` in any case when converting."""
        if isinstance(value, bool):
            return value

        if self.options.convert and isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in _BOOLEAN_STRINGS:
                return normalized == 'true'

        self._report(
            result,
            path,
            f'"{path}" must be a boolean',
            "Use True/False or the strings 'true'/'false'",
            BOOLEAN_BASE,
        )
        return value
