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

"""Unit tests for timestamp injection."""

import pytest
from awslabs.dynamodb_schema import attribute_types as types
from awslabs.dynamodb_schema.schema_definitions import TimestampPolicy
from awslabs.dynamodb_schema.timestamps import apply_timestamps


@pytest.mark.unit
class TestApplyTimestamps:
    """Unit tests for apply_timestamps."""

    def test_disabled_policy_is_identity(self):
        """Test a disabled policy leaves the schema unchanged."""
        schema = {'email': types.string()}
        assert apply_timestamps(schema, TimestampPolicy()) == schema

    def test_default_fields_added_as_dates(self):
        """Test both default timestamp fields are added as dates."""
        augmented = apply_timestamps({'email': types.string()}, TimestampPolicy(enabled=True))
        assert list(augmented) == ['email', 'createdAt', 'updatedAt']
        assert augmented['createdAt'].kind == 'date'
        assert augmented['updatedAt'].kind == 'date'

    def test_renamed_and_suppressed(self):
        """Test a renamed created field and a suppressed updated field."""
        policy = TimestampPolicy.from_config(True, 'created', False)
        augmented = apply_timestamps({}, policy)
        assert list(augmented) == ['created']

    def test_declared_attribute_replaced(self):
        """Test a declared attribute with a timestamp name becomes a date."""
        augmented = apply_timestamps(
            {'createdAt': types.string()}, TimestampPolicy(enabled=True)
        )
        assert augmented['createdAt'].kind == 'date'

    def test_input_not_mutated(self):
        """Test the input schema is left untouched."""
        schema = {'email': types.string()}
        apply_timestamps(schema, TimestampPolicy(enabled=True))
        assert list(schema) == ['email']
