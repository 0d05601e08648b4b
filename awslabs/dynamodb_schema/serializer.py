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

"""Record serialization driven by a schema's attribute type map.

``to_document``/``from_document`` convert between application records and the
plain values the DynamoDB document layer expects (``Decimal`` numbers, Python
sets for set attributes, ISO-8601 strings for dates). ``serialize_item`` and
``deserialize_item`` go one step further to the low-level attribute value
format using boto3's ``TypeSerializer``/``TypeDeserializer``.

Attributes whose tag is ``None`` are encoded by the value's native shape.
"""

from awslabs.dynamodb_schema.schema import SchemaDescriptor
from awslabs.dynamodb_schema.schema_definitions import SET_TYPES, DynamoDBType
from boto3.dynamodb.types import Binary, TypeDeserializer, TypeSerializer
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from pydantic import TypeAdapter
from typing import Any, Optional


_type_serializer = TypeSerializer()
_type_deserializer = TypeDeserializer()
_datetime_adapter = TypeAdapter(datetime)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise TypeError('Booleans cannot be stored as numbers')
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, Binary):
        return value.value
    if isinstance(value, str):
        return value.encode('utf-8')
    return bytes(value)


def _encode_native(value: Any) -> Any:
    """Make an untagged value acceptable to the DynamoDB document layer."""
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        return {k: _encode_native(v) for k, v in value.items() if v is not None}
    if isinstance(value, (list, tuple)):
        return [_encode_native(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return {_encode_native(v) for v in value}
    return value


def _encode_value(value: Any, tag: Any) -> Any:
    if isinstance(tag, Mapping):
        if not isinstance(value, Mapping):
            return _encode_native(value)
        return _encode_mapping(value, tag)

    if tag == DynamoDBType.DATE.value:
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        return value
    if tag == DynamoDBType.NUMBER.value:
        return _to_decimal(value)
    if tag == DynamoDBType.BINARY.value:
        return _to_bytes(value)
    if tag == DynamoDBType.STRING_SET.value:
        return {str(v) for v in value}
    if tag == DynamoDBType.NUMBER_SET.value:
        return {_to_decimal(v) for v in value}
    if tag == DynamoDBType.BINARY_SET.value:
        return {_to_bytes(v) for v in value}
    return _encode_native(value)


def _encode_mapping(record: Mapping[str, Any], type_map: Mapping[str, Any]) -> dict[str, Any]:
    document = {}
    for name, value in record.items():
        if value is None:
            continue
        tag = type_map.get(name)
        # DynamoDB rejects empty sets
        if tag in SET_TYPES and not value:
            continue
        document[name] = _encode_value(value, tag)
    return document


def _decode_number(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _decode_native(value: Any) -> Any:
    if isinstance(value, Decimal):
        return _decode_number(value)
    if isinstance(value, Binary):
        return value.value
    if isinstance(value, Mapping):
        return {k: _decode_native(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_decode_native(v) for v in value]
    if isinstance(value, (set, frozenset)):
        return _sorted_list(_decode_native(v) for v in value)
    return value


def _sorted_list(values) -> list:
    items = list(values)
    try:
        return sorted(items)
    except TypeError:
        return items


def _decode_value(value: Any, tag: Any) -> Any:
    if isinstance(tag, Mapping) and isinstance(value, Mapping):
        return _decode_mapping(value, tag)
    if tag == DynamoDBType.DATE.value and isinstance(value, str):
        return _datetime_adapter.validate_python(value)
    return _decode_native(value)


def _decode_mapping(document: Mapping[str, Any], type_map: Mapping[str, Any]) -> dict[str, Any]:
    return {name: _decode_value(value, type_map.get(name)) for name, value in document.items()}


def to_document(descriptor: SchemaDescriptor, record: Mapping[str, Any]) -> dict[str, Any]:
    """Encode a record into document-layer values using the attribute type map.

    ``None`` values and empty sets are dropped.
    """
    return _encode_mapping(record, descriptor.attribute_type_map)


def from_document(descriptor: SchemaDescriptor, document: Mapping[str, Any]) -> dict[str, Any]:
    """Decode document-layer values into an application record.

    Sets become sorted lists, date attributes become ``datetime`` and numbers
    become ``int`` when integral, ``float`` otherwise.
    """
    return _decode_mapping(document, descriptor.attribute_type_map)


def serialize_item(descriptor: SchemaDescriptor, record: Mapping[str, Any]) -> dict[str, Any]:
    """Serialize a record into DynamoDB attribute values.

    Example:
        {'email': 'a@b.c', 'age': 42} -> {'email': {'S': 'a@b.c'}, 'age': {'N': '42'}}
    """
    document = to_document(descriptor, record)
    return {name: _type_serializer.serialize(value) for name, value in document.items()}


def deserialize_item(descriptor: SchemaDescriptor, item: Mapping[str, Any]) -> dict[str, Any]:
    """Deserialize DynamoDB attribute values into an application record."""
    document = {name: _type_deserializer.deserialize(value) for name, value in item.items()}
    return from_document(descriptor, document)


def build_key(
    descriptor: SchemaDescriptor, hash_value: Any, range_value: Optional[Any] = None
) -> dict[str, Any]:
    """Build the document-layer primary key for a record.

    Args:
        descriptor: Compiled schema
        hash_value: Hash key value, or a record mapping to take both key values from
        range_value: Range key value, required when the table has a range key

    Returns:
        Key mapping encoded like ``to_document``

    Raises:
        ValueError: If a key value is missing
    """
    if isinstance(hash_value, Mapping):
        record = hash_value
        hash_value = record.get(descriptor.hash_key)
        if range_value is None and descriptor.range_key:
            range_value = record.get(descriptor.range_key)

    if hash_value is None:
        raise ValueError(f"Hash key '{descriptor.hash_key}' value is required")

    key = {descriptor.hash_key: hash_value}
    if descriptor.range_key:
        if range_value is None:
            raise ValueError(f"Range key '{descriptor.range_key}' value is required")
        key[descriptor.range_key] = range_value

    return to_document(descriptor, key)
