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

"""Named model registry.

The schema engine never touches the registry; ``define`` compiles a
configuration and registers the result explicitly.
"""

from awslabs.dynamodb_schema.schema import SchemaDescriptor
from awslabs.dynamodb_schema.schema_compiler import compile_schema
from collections.abc import Mapping
from loguru import logger
from typing import Any, Optional


class ModelRegistry:
    """Maps model names to compiled schemas."""

    def __init__(self):
        """Initialize an empty registry."""
        self._models: dict[str, SchemaDescriptor] = {}

    def register(self, name: str, descriptor: SchemaDescriptor) -> SchemaDescriptor:
        """Register (or replace) a model under ``name``."""
        if not name:
            raise ValueError('Model name cannot be empty')
        if name in self._models:
            logger.debug(f"Replacing registered model '{name}'")
        self._models[name] = descriptor
        return descriptor

    def lookup(self, name: str) -> Optional[SchemaDescriptor]:
        """Return the model registered under ``name``, or None."""
        return self._models.get(name)

    def reset(self) -> None:
        """Remove every registered model."""
        self._models = {}

    def names(self) -> list[str]:
        """Registered model names in registration order."""
        return list(self._models)

    def table_name(self, name: str) -> str:
        """Resolve the table name of a registered model.

        Models without a configured table name use the lower-cased model name.

        Raises:
            KeyError: If no model is registered under ``name``
        """
        descriptor = self._models.get(name)
        if descriptor is None:
            raise KeyError(f"Model '{name}' is not registered")
        return descriptor.resolve_table_name(name.lower())

    def __contains__(self, name: object) -> bool:
        """Whether a model is registered under ``name``."""
        return name in self._models

    def __len__(self) -> int:
        """Number of registered models."""
        return len(self._models)


default_registry = ModelRegistry()


def define(
    name: str, config: Mapping[str, Any], registry: Optional[ModelRegistry] = None
) -> SchemaDescriptor:
    """Compile ``config`` and register the result under ``name``.

    Args:
        name: Model name
        config: Model configuration
        registry: Target registry, the process-wide ``default_registry`` if omitted

    Returns:
        The compiled SchemaDescriptor

    Raises:
        SchemaConfigurationError: If the configuration is invalid; nothing is
            registered in that case
    """
    descriptor = compile_schema(config)
    target = registry if registry is not None else default_registry
    return target.register(name, descriptor)
