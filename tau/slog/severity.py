"""
Severity enumeration

Levels as specified by the Cloud Logging LogEntry resource.
"""

from enum import Enum
from typing import Dict


class Severity(str, Enum):
    """
    Log severity enumeration.

    Ordered by increasing urgency. Serialized as the literal name.
    """

    DEBUG = "DEBUG"          # Debug or trace information
    INFO = "INFO"            # Routine information
    NOTICE = "NOTICE"        # Normal but significant events
    WARNING = "WARNING"      # Events that might cause problems
    ERROR = "ERROR"          # Events likely to cause problems
    CRITICAL = "CRITICAL"    # Severe problems or brief outages
    ALERT = "ALERT"          # A person must take action immediately
    EMERGENCY = "EMERGENCY"  # One or more systems are unusable

    def __str__(self) -> str:
        """String representation of severity."""
        return self.value

    @classmethod
    def from_string(cls, name: str) -> "Severity":
        """
        Convert string to Severity.

        Args:
            name: Severity name (case-insensitive, WARN accepted)

        Returns:
            Severity enum value

        Raises:
            ValueError: If name is not valid
        """
        key = name.upper()
        key = SEVERITY_ALIASES.get(key, key)
        if key in cls.__members__:
            return cls[key]
        raise ValueError(f"Invalid severity: {name}")

    @property
    def captures_stack(self) -> bool:
        """Whether emitting at this severity records the call stack."""
        return self in STACK_SEVERITIES


SEVERITY_ALIASES: Dict[str, str] = {
    "WARN": "WARNING",
}

STACK_SEVERITIES = frozenset({
    Severity.ERROR,
    Severity.CRITICAL,
    Severity.ALERT,
    Severity.EMERGENCY,
})
