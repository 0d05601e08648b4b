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

"""Unit tests for the index registry."""

import pytest
from awslabs.dynamodb_schema.index_registry import IndexRegistry


@pytest.mark.unit
class TestValidateIndex:
    """Unit tests for single index declarations."""

    @pytest.fixture
    def registry(self):
        """Create an IndexRegistry instance for testing."""
        return IndexRegistry()

    def test_local_index_inherits_table_hash_key(self, registry):
        """Test a local index without hashKey takes the table hash key."""
        descriptor, errors = registry.validate_index(
            {'name': 'AgeIndex', 'type': 'local', 'rangeKey': 'age'}, 'email', 'indexes[0]'
        )
        assert errors == []
        assert descriptor.hash_key == 'email'
        assert descriptor.range_key == 'age'
        assert descriptor.is_local

    def test_local_index_matching_hash_key(self, registry):
        """Test a local index may restate the table hash key."""
        descriptor, errors = registry.validate_index(
            {'name': 'AgeIndex', 'type': 'local', 'hash_key': 'email', 'range_key': 'age'},
            'email',
            'indexes[0]',
        )
        assert errors == []
        assert descriptor.hash_key == 'email'

    def test_local_index_hash_key_mismatch(self, registry):
        """Test a local index with a different hash key is rejected."""
        descriptor, errors = registry.validate_index(
            {'name': 'AgeIndex', 'type': 'local', 'hashKey': 'name', 'rangeKey': 'age'},
            'email',
            'indexes[0]',
        )
        assert descriptor is None
        assert len(errors) == 1
        assert errors[0].path == 'indexes[0].hashKey'
        assert "'name'" in errors[0].message and "'email'" in errors[0].message

    def test_local_index_requires_range_key(self, registry):
        """Test a local index without a range key is rejected."""
        descriptor, errors = registry.validate_index(
            {'name': 'AgeIndex', 'type': 'local'}, 'email', 'indexes[0]'
        )
        assert descriptor is None
        assert [e.path for e in errors] == ['indexes[0].local.rangeKey']
        assert errors[0].code == 'missing'

    @pytest.mark.parametrize('capacity', ['readCapacity', 'writeCapacity'])
    def test_local_index_forbids_capacity(self, registry, capacity):
        """Test local indexes cannot declare throughput."""
        descriptor, errors = registry.validate_index(
            {'name': 'AgeIndex', 'type': 'local', 'rangeKey': 'age', capacity: 5},
            'email',
            'indexes[0]',
        )
        assert descriptor is None
        assert errors[0].path == f'indexes[0].local.{capacity}'
        assert errors[0].message.startswith(f'{capacity} is not allowed on local indexes')

    def test_global_index(self, registry):
        """Test a global index keeps its own keys and capacities."""
        descriptor, errors = registry.validate_index(
            {
                'name': 'EmailIndex',
                'type': 'global',
                'hashKey': 'email',
                'readCapacity': 5,
                'writeCapacity': 2,
            },
            'id',
            'indexes[0]',
        )
        assert errors == []
        assert descriptor.is_global
        assert descriptor.hash_key == 'email'
        assert descriptor.range_key is None
        assert (descriptor.read_capacity, descriptor.write_capacity) == (5, 2)

    def test_global_index_requires_hash_key(self, registry):
        """Test a global index without a hash key is rejected."""
        _, errors = registry.validate_index(
            {'name': 'EmailIndex', 'type': 'global'}, 'id', 'indexes[0]'
        )
        assert [e.path for e in errors] == ['indexes[0].global.hashKey']

    @pytest.mark.parametrize('capacity', [0, -1, 'fast'])
    def test_global_index_capacity_must_be_positive_int(self, registry, capacity):
        """Test invalid capacities are rejected."""
        _, errors = registry.validate_index(
            {'name': 'EmailIndex', 'type': 'global', 'hashKey': 'email', 'readCapacity': capacity},
            'id',
            'indexes[0]',
        )
        assert [e.path for e in errors] == ['indexes[0].global.readCapacity']

    def test_unknown_type_rejected(self, registry):
        """Test index types other than local and global are rejected."""
        _, errors = registry.validate_index(
            {'name': 'X', 'type': 'regional', 'rangeKey': 'age'}, 'id', 'indexes[0]'
        )
        assert len(errors) == 1
        assert errors[0].path == 'indexes[0]'
        assert 'local' in errors[0].suggestion

    def test_missing_type_rejected(self, registry):
        """Test an index without a type is rejected."""
        _, errors = registry.validate_index({'name': 'X'}, 'id', 'indexes[2]')
        assert len(errors) == 1
        assert errors[0].path == 'indexes[2]'

    def test_unknown_key_rejected(self, registry):
        """Test unsupported index settings are rejected."""
        _, errors = registry.validate_index(
            {'name': 'X', 'type': 'global', 'hashKey': 'a', 'sparse': True}, 'id', 'indexes[0]'
        )
        assert [e.path for e in errors] == ['indexes[0].global.sparse']

    def test_non_mapping_rejected(self, registry):
        """Test a declaration that is not a mapping is rejected."""
        descriptor, errors = registry.validate_index('AgeIndex', 'id', 'indexes[1]')
        assert descriptor is None
        assert errors[0].path == 'indexes[1]'

    def test_local_index_skipped_without_table_hash_key(self, registry):
        """Test local hash key rules are skipped when the table hash key is invalid."""
        descriptor, errors = registry.validate_index(
            {'name': 'AgeIndex', 'type': 'local', 'rangeKey': 'age'}, None, 'indexes[0]'
        )
        assert descriptor is None
        assert errors == []


@pytest.mark.unit
class TestBuild:
    """Unit tests for partitioning index declarations."""

    def test_no_indexes(self):
        """Test absent indexes produce empty read-only partitions."""
        partition = IndexRegistry().build(None, 'id')
        assert partition.is_valid
        assert dict(partition.local_indexes) == {}
        assert dict(partition.global_indexes) == {}

    def test_partition_by_kind(self):
        """Test indexes are keyed by name under their kind."""
        partition = IndexRegistry().build(
            [
                {'name': 'AgeIndex', 'type': 'local', 'rangeKey': 'age'},
                {'name': 'EmailIndex', 'type': 'global', 'hashKey': 'email'},
            ],
            'id',
        )
        assert partition.is_valid
        assert list(partition.local_indexes) == ['AgeIndex']
        assert list(partition.global_indexes) == ['EmailIndex']
        with pytest.raises(TypeError):
            partition.local_indexes['Other'] = None

    def test_all_violations_collected(self):
        """Test every invalid declaration is reported, with its position."""
        partition = IndexRegistry().build(
            [
                {'name': 'AgeIndex', 'type': 'local'},
                {'name': 'Good', 'type': 'global', 'hashKey': 'email'},
                {'name': 'Bad', 'type': 'global'},
            ],
            'id',
        )
        assert not partition.is_valid
        assert [e.path for e in partition.errors] == [
            'indexes[0].local.rangeKey',
            'indexes[2].global.hashKey',
        ]
        assert list(partition.global_indexes) == ['Good']

    def test_duplicate_names_across_kinds(self):
        """Test index names must be unique across local and global indexes."""
        partition = IndexRegistry().build(
            [
                {'name': 'ByAge', 'type': 'local', 'rangeKey': 'age'},
                {'name': 'ByAge', 'type': 'global', 'hashKey': 'age'},
            ],
            'id',
        )
        assert [e.path for e in partition.errors] == ['indexes[1].name']
        assert "Duplicate index name 'ByAge'" in partition.errors[0].message
