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

"""Pydantic models for model configuration.

Keys are accepted in snake_case (``hash_key``) or camelCase (``hashKey``).
Error locations are reported with the camelCase aliases.
"""

from awslabs.dynamodb_schema.errors import SchemaConfigurationError
from awslabs.dynamodb_schema.logging_config import LogSink, default_log_sink
from awslabs.dynamodb_schema.schema_definitions import AttributeDescriptor
from awslabs.dynamodb_schema.validation_utils import ValidationError
from collections.abc import Callable, Mapping
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    StrictBool,
    StrictStr,
    ValidationInfo,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic.types import StringConstraints
from typing import Annotated, Any, Literal, Optional, Union


NonEmptyStr = Annotated[StrictStr, StringConstraints(min_length=1)]
PresenceOption = Literal['optional', 'required', 'forbidden', 'ignore']


class ConfigModel(BaseModel):
    """Base for configuration models: camelCase aliases, unknown keys rejected."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra='forbid',
        frozen=True,
    )


class ValidationOptions(ConfigModel):
    """Record validation options.

    Set table-wide through the ``validation`` config key and overridable per
    call. Only explicitly set options override, see ``merge``.
    """

    abort_early: StrictBool = True
    convert: StrictBool = True
    allow_unknown: StrictBool = False
    strip_unknown: StrictBool = False
    presence: PresenceOption = 'optional'
    no_defaults: StrictBool = False

    def merge(
        self, overrides: Optional[Union['ValidationOptions', Mapping[str, Any]]]
    ) -> 'ValidationOptions':
        """Return options with the explicitly set ``overrides`` applied on top.

        Raises:
            SchemaConfigurationError: If an override is unknown or has a bad value
        """
        if overrides is None:
            return self
        if not isinstance(overrides, ValidationOptions):
            try:
                overrides = ValidationOptions.model_validate(overrides)
            except PydanticValidationError as e:
                raise SchemaConfigurationError(pydantic_errors(e, 'options')) from e
        if not overrides.model_fields_set:
            return self
        return self.model_copy(update=overrides.model_dump(include=overrides.model_fields_set))


class LocalIndexConfig(ConfigModel):
    """Local secondary index declaration.

    Shares the table hash key, requires a range key and inherits table capacity.
    """

    type: Literal['local']
    name: NonEmptyStr
    hash_key: Optional[StrictStr] = None
    range_key: NonEmptyStr
    projection: Optional[dict[str, Any]] = None
    read_capacity: Any = None
    write_capacity: Any = None

    @field_validator('read_capacity', 'write_capacity')
    @classmethod
    def _forbid_capacity(cls, v: Any, info: ValidationInfo) -> Any:
        """Local indexes cannot declare their own capacity."""
        if v is not None:
            raise ValueError(
                f'{to_camel(info.field_name)} is not allowed on local indexes, '
                'they inherit the table capacity'
            )
        return v


class GlobalIndexConfig(ConfigModel):
    """Global secondary index declaration with its own hash key."""

    type: Literal['global']
    name: NonEmptyStr
    hash_key: NonEmptyStr
    range_key: Optional[StrictStr] = None
    projection: Optional[dict[str, Any]] = None
    read_capacity: Optional[PositiveInt] = None
    write_capacity: Optional[PositiveInt] = None


IndexConfig = Annotated[Union[LocalIndexConfig, GlobalIndexConfig], Field(discriminator='type')]


class SchemaConfig(ConfigModel):
    """Top-level model configuration.

    ``indexes`` entries and ``schema`` declarations are checked by the index
    registry and the compiler so their violations carry precise paths.
    """

    hash_key: NonEmptyStr
    range_key: Optional[StrictStr] = None
    table_name: Optional[Union[NonEmptyStr, Callable[[], str]]] = None
    indexes: list[Any] = Field(default_factory=list)
    attributes: Any = Field(default=None, alias='schema')
    timestamps: StrictBool = False
    created_at: Optional[Union[StrictStr, StrictBool]] = None
    updated_at: Optional[Union[StrictStr, StrictBool]] = None
    log: Any = Field(default_factory=default_log_sink)
    validation: ValidationOptions = Field(default_factory=ValidationOptions)

    @field_validator('attributes')
    @classmethod
    def _validate_attributes_shape(cls, v: Any) -> Any:
        """Attributes are a mapping of declarations or an object descriptor."""
        if v is None or isinstance(v, Mapping):
            return v
        if isinstance(v, AttributeDescriptor) and v.is_object:
            return v
        raise ValueError(
            'schema must be a mapping of attribute declarations or an object attribute'
        )

    @field_validator('log', mode='before')
    @classmethod
    def _coerce_log(cls, v: Any) -> Any:
        """Accept any object or mapping exposing info/warn callables."""
        if v is None:
            return default_log_sink()
        try:
            return LogSink.from_object(v)
        except TypeError as e:
            raise ValueError(str(e)) from e


def format_location(loc: tuple, prefix: str = '') -> str:
    """Format Pydantic location tuple as readable path.

    Example: ('indexes', 3, 'local', 'rangeKey') -> 'indexes[3].local.rangeKey'
    """
    parts = [prefix] if prefix else []
    for item in loc:
        if isinstance(item, int):
            parts.append(f'[{item}]')
        else:
            if parts:
                parts.append('.')
            parts.append(str(item))
    return ''.join(parts)


def _customize_error_message(error: dict) -> str:
    """Strip the "Value error, " prefix pydantic adds to custom validator errors."""
    msg = error.get('msg', '')
    if msg.startswith('Value error, '):
        msg = msg[len('Value error, ') :]
    return msg


def _suggestion_for(error: dict) -> str:
    error_type = error.get('type', '')
    if error_type == 'missing':
        return 'Add the missing setting'
    if error_type == 'extra_forbidden':
        return 'Remove the unsupported setting'
    if error_type in ('union_tag_invalid', 'union_tag_not_found'):
        return "Set type to 'local' or 'global'"
    return ''


def pydantic_errors(e: PydanticValidationError, prefix: str = '') -> list[ValidationError]:
    """Convert Pydantic validation errors to ValidationError entries.

    Args:
        e: The pydantic exception
        prefix: Path prepended to every error location

    Returns:
        One ValidationError per pydantic error, located by dotted path
    """
    errors = []
    for error in e.errors():
        location = format_location(error.get('loc', ()), prefix) or prefix or 'config'
        errors.append(
            ValidationError(
                path=location,
                message=_customize_error_message(error),
                suggestion=_suggestion_for(error),
                code=error.get('type'),
            )
        )
    return errors
