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

"""Validation models shared by schema compilation and record validation.

Configuration problems and record problems are both collected as
``ValidationError`` entries so callers can report every issue at once.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationError:
    """Represents a validation error with context and suggestions."""

    path: str  # e.g., "indexes[0].local.rangeKey" or "address.city"
    message: str  # Clear error description
    suggestion: str = ''  # Helpful suggestion for fixing
    severity: str = 'error'  # "error" | "warning"
    code: str | None = None  # Machine readable reason, e.g. "any.required"


@dataclass
class ValidationResult:
    """Result of a validation pass.

    ``value`` holds the validated record (coerced and defaulted) when the result
    comes from record validation; it stays ``None`` for configuration checks.
    """

    is_valid: bool = True
    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationError] = field(default_factory=list)
    value: Any = None

    def add_error(
        self, path: str, message: str, suggestion: str = '', code: str | None = None
    ) -> ValidationError:
        """Add an error to the validation result."""
        error = ValidationError(path, message, suggestion, 'error', code)
        self.errors.append(error)
        self.is_valid = False
        return error

    def add_errors(self, errors: list[ValidationError]) -> None:
        """Add multiple errors to the validation result."""
        if errors:
            self.errors.extend(errors)
            self.is_valid = False

    def add_warning(self, path: str, message: str, suggestion: str = '') -> None:
        """Add a warning to the validation result."""
        self.warnings.append(ValidationError(path, message, suggestion, 'warning'))

    def errors_with_code(self, code: str) -> list[ValidationError]:
        """Return the errors carrying the given code."""
        return [error for error in self.errors if error.code == code]

    def format(self, success_message: str, failure_prefix: str) -> str:
        """Render the result for humans, one bullet per entry.

        Args:
            success_message: Shown alone when there is nothing to report
            failure_prefix: Heading of the error section

        Returns:
            Multi-line report, errors first, then warnings
        """
        if self.is_valid and not self.warnings:
            return f'✅ {success_message}'

        lines = []
        for heading, entries in (
            (f'❌ {failure_prefix}:', self.errors),
            ('⚠️  Warnings:', self.warnings),
        ):
            if not entries:
                continue
            lines.append(heading)
            lines.extend(_format_entry(entry) for entry in entries)
        return '\n'.join(lines)


def _format_entry(entry: ValidationError) -> str:
    text = f'  • {entry.path}: {entry.message}'
    if entry.suggestion:
        text += f'\n    💡 {entry.suggestion}'
    return text
