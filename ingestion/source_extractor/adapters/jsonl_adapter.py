"""JSON Lines File Adapter.

Reads ServiceNow records exported as JSON Lines (one Table API result object
per line), e.g. from a saved `GET /api/now/table/{table}` response. Pages are
served in fixed-size chunks; the page token is the byte offset to resume from,
so each fetch seeks straight to its page.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from ..base import SourceAdapter, SourceRecordRaw

logger = logging.getLogger(__name__)


class JsonlFileAdapter(SourceAdapter):
    """Adapter that pages through a JSON Lines file of records.

    Example:
        adapter = JsonlFileAdapter("incident", "incident.jsonl", records_per_page=100)
        records, next_token = adapter.fetch()
    """

    def __init__(
        self,
        table: str,
        path: Union[str, Path],
        records_per_page: int = 100
    ):
        """Initialize the adapter.

        Args:
            table: ServiceNow table the records belong to
            path: Path to the JSON Lines file
            records_per_page: Maximum number of records returned per fetch

        Raises:
            ValueError: If records_per_page is not positive
        """
        super().__init__(table=table)
        if records_per_page <= 0:
            raise ValueError("records_per_page must be positive")
        self.path = Path(path)
        self.records_per_page = records_per_page

    def fetch(
        self, page_token: Optional[str] = None
    ) -> tuple[list[SourceRecordRaw], Optional[str]]:
        """Read the next page of records.

        Blank lines are skipped and do not count towards the page size.

        Args:
            page_token: Byte offset as string, or None for the start of the file

        Returns:
            Tuple of (records, next page token)

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If a line is not a JSON object
        """
        start_offset = 0 if page_token is None else int(page_token)
        records: list[SourceRecordRaw] = []

        with self.path.open("rb") as handle:
            handle.seek(start_offset)

            while True:
                offset = handle.tell()
                raw_line = handle.readline()
                if not raw_line:
                    break

                if len(records) >= self.records_per_page:
                    logger.debug(
                        "Read page of records",
                        extra={'table': self.table, 'count': len(records), 'next_offset': offset}
                    )
                    return records, str(offset)

                line = raw_line.decode("utf-8").strip()
                if not line:
                    continue

                try:
                    payload = json.loads(line)
                except json.JSONDecodeError as e:
                    raise ValueError(
                        f"Malformed JSON at byte offset {offset} of {self.path}: {e}"
                    ) from e

                if not isinstance(payload, dict):
                    raise ValueError(
                        f"Line at byte offset {offset} of {self.path} is not a JSON object"
                    )

                sys_id = payload.get("sys_id")
                if isinstance(sys_id, dict):
                    # display_value=true/all wraps sys_id as well
                    sys_id = sys_id.get("value")
                records.append(
                    SourceRecordRaw(
                        table=self.table,
                        payload=payload,
                        sys_id=sys_id if isinstance(sys_id, str) else None,
                    )
                )

        logger.debug(
            "Read last page of records",
            extra={'table': self.table, 'count': len(records)}
        )
        return records, None
