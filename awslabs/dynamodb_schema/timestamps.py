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

"""Injection of created/updated timestamp attributes."""

from awslabs.dynamodb_schema.attribute_types import date
from awslabs.dynamodb_schema.schema_definitions import AttributeDescriptor, TimestampPolicy
from collections.abc import Mapping


def apply_timestamps(
    logical_schema: Mapping[str, AttributeDescriptor], policy: TimestampPolicy
) -> dict[str, AttributeDescriptor]:
    """Return the logical schema with the policy's timestamp attributes added.

    Must run before the attribute type map is derived so the timestamps are
    tagged like any other date attribute. A declared attribute with the same
    name is replaced by the date attribute.
    """
    augmented = dict(logical_schema)
    for name in policy.field_names:
        augmented[name] = date()
    return augmented
