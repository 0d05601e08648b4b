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

"""Logging setup for the schema engine.

The package logs through loguru and is disabled on import, so nothing is
emitted unless the application calls ``enable_logging``.
"""

import os
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from loguru import logger
from typing import Any, Optional


PACKAGE_NAME = 'awslabs.dynamodb_schema'
LOG_LEVEL_ENV_VAR = 'DYNAMODB_SCHEMA_LOG_LEVEL'
DEFAULT_LOG_LEVEL = 'WARNING'


@dataclass(frozen=True)
class LogSink:
    """The ``info``/``warn`` pair a model reports through."""

    info: Callable[..., Any]
    warn: Callable[..., Any]

    @classmethod
    def from_object(cls, log: Any) -> 'LogSink':
        """Build a sink from a mapping or an object exposing ``info`` and ``warn``.

        Objects exposing ``warning`` instead of ``warn`` (such as
        ``logging.Logger``) are accepted. Missing methods fall back to the
        package logger.

        Raises:
            TypeError: If a provided ``info``/``warn`` is not callable
        """
        if isinstance(log, LogSink):
            return log

        default = default_log_sink()

        def lookup(*names: str) -> Optional[Any]:
            for name in names:
                if isinstance(log, Mapping):
                    candidate = log.get(name)
                else:
                    candidate = getattr(log, name, None)
                if candidate is not None:
                    return candidate
            return None

        info = lookup('info')
        warn = lookup('warn', 'warning')
        for name, candidate in (('info', info), ('warn', warn)):
            if candidate is not None and not callable(candidate):
                raise TypeError(f'log.{name} must be callable')

        return cls(info=info or default.info, warn=warn or default.warn)


def default_log_sink() -> LogSink:
    """Sink forwarding to the package loguru logger."""
    return LogSink(info=logger.info, warn=logger.warning)


def enable_logging(level: Optional[str] = None, sink: Any = sys.stderr) -> int:
    """Enable package logging and add a sink filtered to this package.

    Args:
        level: Minimum level; defaults to ``DYNAMODB_SCHEMA_LOG_LEVEL`` or WARNING
        sink: Any loguru sink, stderr by default

    Returns:
        The loguru handler id, for ``disable_logging``
    """
    logger.enable(PACKAGE_NAME)
    resolved_level = level or os.getenv(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL)
    return logger.add(sink, level=resolved_level.upper(), filter=PACKAGE_NAME)


def disable_logging(handler_id: Optional[int] = None) -> None:
    """Disable package logging and remove the handler added by ``enable_logging``."""
    if handler_id is not None:
        logger.remove(handler_id)
    logger.disable(PACKAGE_NAME)
