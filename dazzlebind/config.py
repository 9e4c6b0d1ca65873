"""Configuration system for DazzleBind.

This module defines how a Context discovers push sources next to the
members it binds, and the limits it enforces while dispatching
notifications. A configuration value is passed to each Context explicitly;
there is no process-wide settings object.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List


class NamingCase(Enum):
    """How a push-source name is derived from a path segment.

    The provider name is the segment with its first letter adjusted,
    followed by the configured suffix.
    """
    FIRST_LETTER_LOWER_CASE = "lower"   # "Health" -> "healthProperty"
    FIRST_LETTER_UPPER_CASE = "upper"   # "Health" -> "HealthProperty"


@dataclass
class BindingConfig:
    """Complete configuration for a binding context.

    Controls the naming rule used to locate push sources on a parent value
    and the depth limit for nested notification dispatch.
    """

    # Push-source naming
    naming_case: NamingCase = NamingCase.FIRST_LETTER_LOWER_CASE
    append_underscore: bool = False
    provider_suffix: str = "Property"

    # Dispatch guard
    max_dispatch_depth: int = 64  # Nested notifications per context

    # Convenience constructors for common configurations

    @classmethod
    def private_providers(cls) -> 'BindingConfig':
        """Create config for providers stored as ``_healthProperty`` members.

        Returns:
            BindingConfig with underscore-prefixed, lower-case provider names
        """
        return cls(
            naming_case=NamingCase.FIRST_LETTER_LOWER_CASE,
            append_underscore=True,
        )

    @classmethod
    def upper_case_providers(cls) -> 'BindingConfig':
        """Create config for providers named exactly like the segment.

        Returns:
            BindingConfig that keeps the segment's first letter unchanged
        """
        return cls(naming_case=NamingCase.FIRST_LETTER_UPPER_CASE)

    def provider_name(self, segment: str) -> str:
        """Derive the push-source member name for a path segment.

        Args:
            segment: Path segment, e.g. ``"Health"``

        Returns:
            Expected member name, e.g. ``"healthProperty"``

        Raises:
            ValueError: If segment is empty
        """
        if not segment:
            raise ValueError("Cannot derive a provider name from an empty segment")

        if self.naming_case == NamingCase.FIRST_LETTER_LOWER_CASE:
            name = segment[0].lower() + segment[1:]
        else:
            name = segment

        if self.append_underscore:
            name = "_" + name

        return name + self.provider_suffix

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(self.naming_case, NamingCase):
            errors.append(f"naming_case must be a NamingCase, got {self.naming_case!r}")

        if not self.provider_suffix and not self.append_underscore:
            errors.append("provider_suffix cannot be empty unless append_underscore is set")

        if self.max_dispatch_depth <= 0:
            errors.append("max_dispatch_depth must be positive")

        return errors
