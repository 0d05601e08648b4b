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

"""Unit tests for validation_utils module."""

import pytest
from awslabs.dynamodb_schema.errors import RecordValidationError, SchemaConfigurationError
from awslabs.dynamodb_schema.validation_utils import ValidationError, ValidationResult


@pytest.mark.unit
class TestValidationError:
    """Unit tests for ValidationError dataclass."""

    def test_creation_with_defaults(self):
        """Test ValidationError creation with default suggestion, severity and code."""
        error = ValidationError(path='indexes[0].local.rangeKey', message='Field required')
        assert error.path == 'indexes[0].local.rangeKey'
        assert error.message == 'Field required'
        assert error.suggestion == ''
        assert error.severity == 'error'
        assert error.code is None

    def test_creation_with_custom_severity(self):
        """Test ValidationError creation with custom severity."""
        warning = ValidationError(
            path='schema.age',
            message='Attribute kind has no wire type',
            suggestion='Use a known kind',
            severity='warning',
        )
        assert warning.severity == 'warning'


@pytest.mark.unit
class TestValidationResult:
    """Unit tests for ValidationResult dataclass."""

    def test_creation(self):
        """Test ValidationResult defaults."""
        result = ValidationResult()
        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == []
        assert result.value is None

    def test_add_error(self):
        """Test adding a single error."""
        result = ValidationResult()
        error = result.add_error('age', 'must be a number', 'Pass a number', 'number.base')
        assert result.is_valid is False
        assert result.errors == [error]
        assert error.code == 'number.base'
        assert error.severity == 'error'

    def test_add_errors(self):
        """Test adding multiple errors."""
        result = ValidationResult()
        result.add_errors([ValidationError('a', 'msg1'), ValidationError('b', 'msg2')])
        assert result.is_valid is False
        assert len(result.errors) == 2

    def test_add_errors_empty_keeps_valid(self):
        """Test adding an empty error list keeps the result valid."""
        result = ValidationResult()
        result.add_errors([])
        assert result.is_valid is True

    def test_add_warning(self):
        """Test warnings do not invalidate the result."""
        result = ValidationResult()
        result.add_warning('schema', 'Test warning')
        assert result.is_valid is True
        assert result.warnings[0].severity == 'warning'

    def test_errors_with_code(self):
        """Test filtering errors by code."""
        result = ValidationResult()
        result.add_error('a', 'missing', code='any.required')
        result.add_error('b', 'unknown', code='object.unknown')
        assert [e.path for e in result.errors_with_code('any.required')] == ['a']

    def test_format_success(self):
        """Test formatting a valid result."""
        assert ValidationResult().format('All good', 'Failed') == '✅ All good'

    def test_format_errors_and_warnings(self):
        """Test formatting errors, suggestions and warnings."""
        result = ValidationResult()
        result.add_error('hashKey', 'Field required', 'Add the missing setting')
        result.add_warning('schema.x', 'Odd kind')
        output = result.format('ok', 'Invalid table schema')
        assert '❌ Invalid table schema:' in output
        assert '  • hashKey: Field required' in output
        assert '    💡 Add the missing setting' in output
        assert '⚠️  Warnings:' in output
        assert '  • schema.x: Odd kind' in output


@pytest.mark.unit
class TestErrors:
    """Unit tests for the engine exceptions."""

    def test_schema_configuration_error_carries_all_errors(self):
        """Test SchemaConfigurationError keeps every violation and formats them."""
        errors = [ValidationError('hashKey', 'Field required'), ValidationError('x', 'bad')]
        exc = SchemaConfigurationError(errors)
        assert exc.errors == errors
        assert isinstance(exc, ValueError)
        assert 'Invalid table schema, check your config' in str(exc)
        assert 'hashKey: Field required' in str(exc)

    def test_record_validation_error_carries_value(self):
        """Test RecordValidationError keeps errors and the partial value."""
        errors = [ValidationError('age', 'must be a number')]
        exc = RecordValidationError(errors, {'age': 'x'})
        assert exc.errors == errors
        assert exc.value == {'age': 'x'}
        assert 'Record failed validation' in str(exc)
