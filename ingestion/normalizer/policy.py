"""
Flattening Policy

Controls how display-value objects are represented in destination records:

- NONE: one nested struct field with "display_value" and "value" sub-fields
- FLATTENED: two sibling string fields, "<name>" (raw value) and
  "<name>_display_value" (label)

The same policy must be used for schema inference and record materialization.
"""

import logging
from enum import Enum

from .errors import InvalidArgumentError

logger = logging.getLogger(__name__)

# Suffix of the companion field holding the label under FLATTENED
DISPLAY_VALUE_SUFFIX = "_display_value"

# sysparm_display_value modes accepted by the ServiceNow Table API
VALID_DISPLAY_VALUE_MODES = {'false', 'true', 'all'}


class FlatteningPolicy(Enum):
    """How display-value objects are laid out in the destination schema."""

    NONE = "none"
    FLATTENED = "flattened"

    @classmethod
    def from_display_value_mode(cls, mode: str) -> "FlatteningPolicy":
        """
        Map a connector display_value mode to a flattening policy.

        "false" and "true" keep display-value objects nested (with "false" the
        source only returns scalars anyway); "all" flattens them.

        Args:
            mode: Case-insensitive "false", "true" or "all"

        Returns:
            Matching FlatteningPolicy

        Raises:
            InvalidArgumentError: If the mode is not recognized
        """
        normalized = mode.strip().lower() if isinstance(mode, str) else None

        if normalized not in VALID_DISPLAY_VALUE_MODES:
            raise InvalidArgumentError(
                f"display_value mode must be one of {sorted(VALID_DISPLAY_VALUE_MODES)}, got {mode!r}"
            )

        policy = cls.FLATTENED if normalized == 'all' else cls.NONE
        logger.debug(
            "Resolved flattening policy",
            extra={'display_value': mode, 'policy': policy.value}
        )
        return policy


def display_value_field_name(field_name: str) -> str:
    """Return the companion field name used for labels under FLATTENED."""
    return f"{field_name}{DISPLAY_VALUE_SUFFIX}"
