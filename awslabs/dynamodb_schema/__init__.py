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

"""awslabs.dynamodb-schema"""

from awslabs.dynamodb_schema import attribute_types as types
from awslabs.dynamodb_schema.config import ValidationOptions
from awslabs.dynamodb_schema.errors import RecordValidationError, SchemaConfigurationError
from awslabs.dynamodb_schema.logging_config import (
    PACKAGE_NAME,
    LogSink,
    disable_logging,
    enable_logging,
)
from awslabs.dynamodb_schema.registry import ModelRegistry, default_registry, define
from awslabs.dynamodb_schema.schema import SchemaDescriptor
from awslabs.dynamodb_schema.schema_compiler import SchemaCompiler, compile_schema
from awslabs.dynamodb_schema.schema_definitions import (
    AttributeDescriptor,
    DefaultProvider,
    IndexDescriptor,
    TimestampPolicy,
)
from awslabs.dynamodb_schema.validation_utils import ValidationError, ValidationResult
from importlib.metadata import version
from loguru import logger


try:
    __version__ = version('awslabs.dynamodb-schema')
except Exception:
    __version__ = '0.0.0+dev'

# Library convention for loguru: silent until the application opts in
logger.disable(PACKAGE_NAME)

__all__ = [
    'AttributeDescriptor',
    'DefaultProvider',
    'IndexDescriptor',
    'LogSink',
    'ModelRegistry',
    'RecordValidationError',
    'SchemaCompiler',
    'SchemaConfigurationError',
    'SchemaDescriptor',
    'TimestampPolicy',
    'ValidationError',
    'ValidationOptions',
    'ValidationResult',
    'compile_schema',
    'default_registry',
    'define',
    'disable_logging',
    'enable_logging',
    'types',
]
