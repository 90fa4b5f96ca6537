"""Source Adapter Base Class.

This module defines the interface that record sources (Table API clients,
exported record files) implement so the normalizer can consume records the
same way regardless of where they come from.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class SourceRecordRaw:
    """Raw ServiceNow record.

    The field shapes depend on the request's display_value mode, so the record
    is kept as the decoded JSON object.
    """

    table: str  # ServiceNow table name (e.g., "incident")
    payload: dict[str, Any]  # Decoded JSON object for one record
    sys_id: Optional[str] = None  # Record's sys_id (if available)


class SourceAdapter(ABC):
    """Abstract base class for record sources.

    Usage:
        class MySourceAdapter(SourceAdapter):
            def __init__(self, table: str):
                super().__init__(table=table)

            def fetch(self, page_token=None):
                # Return one page of records and the next page token
                ...
    """

    def __init__(self, table: str):
        """Initialize the adapter.

        Args:
            table: ServiceNow table the records belong to
        """
        self.table = table

    @abstractmethod
    def fetch(
        self, page_token: Optional[str] = None
    ) -> tuple[list[SourceRecordRaw], Optional[str]]:
        """Fetch one page of records.

        Args:
            page_token: Token for pagination. None for the first page.

        Returns:
            A tuple of:
            - List of SourceRecordRaw objects
            - Next page token (None when there are no more pages)

        Example:
            records, next_token = adapter.fetch()
            while next_token:
                more, next_token = adapter.fetch(next_token)
                records.extend(more)
        """
        pass

    def iter_records(self):
        """Yield every record, following page tokens until exhausted."""
        records, next_token = self.fetch()
        yield from records
        while next_token is not None:
            records, next_token = self.fetch(next_token)
            yield from records

    def __repr__(self) -> str:
        """String representation of the adapter."""
        return f"{self.__class__.__name__}(table='{self.table}')"
