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

"""Shared fixtures for schema engine tests."""

import pytest
from awslabs.dynamodb_schema import attribute_types as types


@pytest.fixture
def account_config():
    """Minimal account model: hash key plus two attributes."""
    return {
        'hashKey': 'email',
        'schema': {
            'email': types.string(),
            'age': types.number(),
        },
    }


@pytest.fixture
def profile_config():
    """Model exercising range keys, nested objects, sets, defaults and indexes."""
    return {
        'hash_key': 'user_id',
        'range_key': 'created',
        'table_name': 'profiles',
        'schema': {
            'user_id': types.uuid(),
            'created': types.date(),
            'email': types.string(required=True),
            'age': types.number(),
            'score': types.number(),
            'roles': types.string_set(),
            'settings': types.obj(
                {
                    'nickname': types.string(),
                    'theme': types.string(default='dark'),
                    'tags': types.string_set(),
                },
            ),
        },
        'indexes': [
            {'name': 'AgeIndex', 'type': 'local', 'range_key': 'age'},
            {
                'name': 'EmailIndex',
                'type': 'global',
                'hash_key': 'email',
                'range_key': 'created',
                'projection': {'ProjectionType': 'ALL'},
                'read_capacity': 5,
                'write_capacity': 2,
            },
        ],
    }


@pytest.fixture
def log_messages():
    """Collects messages sent to a log sink built from this fixture's callables."""
    messages = {'info': [], 'warn': []}
    sink = {
        'info': lambda message: messages['info'].append(message),
        'warn': lambda message: messages['warn'].append(message),
    }
    return messages, sink
