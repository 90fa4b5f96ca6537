"""
Field Name Helpers

ServiceNow dot-walked field names (e.g. "caller_id.name") cannot be used as
destination field names directly, so every '.' is rewritten as '__':

    parent.incident  ->  parent__incident
    a.b.c            ->  a__b__c

The same rewrite must be applied when building schemas, value records and key
records, otherwise field lookups fail.
"""

from typing import Optional

# Separator used by ServiceNow for dot-walked reference fields
SOURCE_FIELD_SEPARATOR = "."

# Replacement token in destination field names
DESTINATION_FIELD_SEPARATOR = "__"


def sanitize_field_name(name: str) -> str:
    """
    Rewrite a source field name into a destination-safe field name.

    Examples:
        >>> sanitize_field_name("parent.incident")
        'parent__incident'
        >>> sanitize_field_name("number")
        'number'

    Args:
        name: Source field name

    Returns:
        Field name with every '.' replaced by '__'
    """
    return name.replace(SOURCE_FIELD_SEPARATOR, DESTINATION_FIELD_SEPARATOR)


def is_blank(name: Optional[str]) -> bool:
    """Return True for None, empty or whitespace-only field names."""
    return name is None or not name.strip()


def comma_delimited_to_list(text: Optional[str]) -> list[str]:
    """
    Split a comma-delimited configuration value into its non-empty entries.

    Examples:
        >>> comma_delimited_to_list(" sys_id, number ,,")
        ['sys_id', 'number']
        >>> comma_delimited_to_list(None)
        []

    Args:
        text: Comma-delimited string (may be None)

    Returns:
        List of trimmed, non-empty entries in their original order
    """
    if text is None:
        return []

    result = []
    for entry in text.strip().split(","):
        candidate = entry.strip()
        if candidate:
            result.append(candidate)
    return result
