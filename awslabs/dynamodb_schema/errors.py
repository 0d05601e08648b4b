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

"""Exceptions raised by the schema engine."""

from awslabs.dynamodb_schema.validation_utils import ValidationError, ValidationResult
from typing import Any


class SchemaConfigurationError(ValueError):
    """Raised when a model configuration violates its structural contract.

    Carries every violation found, not just the first, so the configuration can
    be fixed in one pass.
    """

    def __init__(self, errors: list[ValidationError]):
        """Initialize with the complete list of configuration violations."""
        self.errors = list(errors)
        result = ValidationResult(is_valid=False, errors=self.errors)
        super().__init__(
            result.format('Schema is valid', 'Invalid table schema, check your config')
        )


class RecordValidationError(ValueError):
    """Raised when a record fails validation and the caller asked for exceptions."""

    def __init__(self, errors: list[ValidationError], value: Any = None):
        """Initialize with the record errors and the partially validated value."""
        self.errors = list(errors)
        self.value = value
        result = ValidationResult(is_valid=False, errors=self.errors)
        super().__init__(result.format('Record is valid', 'Record failed validation'))
