"""
Normalizer Service - Main Entry Point

This is the command-line interface for the normalizer service. It reads raw
ServiceNow records from a JSON Lines file, normalizes each one, and writes one
JSON line per record carrying the topic, key and value with their schemas.

Usage:
    python -m ingestion.normalizer.main --table TABLE --input PATH [OPTIONS]

Options:
    --table TEXT          ServiceNow table the records belong to (e.g., 'incident')
    --input PATH          JSON Lines file of Table API records
    --output PATH         Write normalized records here instead of stdout
    --config PATH         Connector configuration (default: $CONNECTOR_CONFIG
                          or config/connector.yml)
    --display-value MODE  Override the configured display_value mode (false|true|all)
    --key-fields TEXT     Override the table's key fields (comma-delimited)
    --limit INTEGER       Maximum number of records to process
    --verbose             Enable debug logging
    --help                Show this message and exit

Examples:
    # Normalize exported incidents with the configured settings:
    python -m ingestion.normalizer.main --table incident --input incident.jsonl

    # Records fetched with display_value=all, keyed by number:
    python -m ingestion.normalizer.main --table incident --input incident.jsonl \\
        --display-value all --key-fields number

Exit Codes:
    0: Success
    1: Normalization errors occurred (some records failed)
    2: Fatal error (configuration, unreadable input, etc.)
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Optional, Sequence, TextIO

from dotenv import load_dotenv

from ingestion.source_extractor.adapters.jsonl_adapter import JsonlFileAdapter
from ingestion.source_extractor.base import SourceAdapter
from ingestion.source_extractor.source_config import ConnectorConfig, load_connector_config

from .display_values import VALUE_KEY, is_display_value_object
from .errors import NormalizationError
from .identifiers import comma_delimited_to_list
from .normalize import NormalizedRecord, SchemaCache, normalize_record
from .policy import FlatteningPolicy
from .timestamps import parse_servicenow_datetime_utc

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description='Normalize raw ServiceNow records into typed key/value records',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    parser.add_argument(
        '--table',
        type=str,
        required=True,
        help='ServiceNow table the records belong to (e.g., "incident")'
    )

    parser.add_argument(
        '--input',
        type=str,
        required=True,
        help='JSON Lines file of Table API records',
        dest='input_path'
    )

    parser.add_argument(
        '--output',
        type=str,
        help='Write normalized records to this file instead of stdout',
        default=None,
        dest='output_path'
    )

    parser.add_argument(
        '--config',
        type=str,
        help='Connector configuration file',
        default=None,
        dest='config_path'
    )

    parser.add_argument(
        '--display-value',
        type=str,
        help='Override the configured display_value mode (false, true or all)',
        default=None,
        dest='display_value'
    )

    parser.add_argument(
        '--key-fields',
        type=str,
        help='Override the table key fields (comma-delimited)',
        default=None,
        dest='key_fields'
    )

    parser.add_argument(
        '--limit',
        type=int,
        help='Maximum number of records to process',
        default=None
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    return parser.parse_args(argv)


def extract_updated_at(record: dict[str, Any], timestamp_field: Optional[str]) -> Optional[datetime]:
    """
    Parse the record's update timestamp, if configured and present.

    Display-value objects contribute their raw value, which is always in the
    internal format.

    Raises:
        NormalizationError: If the timestamp cannot be parsed
    """
    if not timestamp_field:
        return None

    raw = record.get(timestamp_field)
    if is_display_value_object(raw):
        raw = raw.get(VALUE_KEY)

    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None

    return parse_servicenow_datetime_utc(str(raw))


def to_message(
    topic: str,
    normalized: NormalizedRecord,
    updated_at: Optional[datetime]
) -> dict[str, Any]:
    """Build the JSON message written for one normalized record."""
    return {
        'topic': topic,
        'key_schema': normalized.key_schema.to_dict(),
        'key': normalized.key.to_dict(),
        'value_schema': normalized.schema.to_dict(),
        'value': normalized.value.to_dict(),
        'updated_at': updated_at.isoformat() if updated_at else None,
    }


def run_normalizer(
    adapter: SourceAdapter,
    config: ConnectorConfig,
    output: TextIO,
    policy: Optional[FlatteningPolicy] = None,
    key_fields: Optional[list[str]] = None,
    limit: Optional[int] = None,
    schema_cache: Optional[SchemaCache] = None
) -> dict[str, int]:
    """
    Main normalizer logic.

    Args:
        adapter: Source of raw records
        config: Connector configuration
        output: Stream receiving one JSON line per normalized record
        policy: Flattening policy override (default: from config)
        key_fields: Key field override (default: from the table config)
        limit: Maximum number of records to process
        schema_cache: Shared schema cache (default: a fresh cache)

    Returns:
        Dictionary with statistics:
        - fetched: Number of raw records read
        - normalized: Number successfully normalized and written
        - failed: Number that failed normalization
    """
    stats = {
        'fetched': 0,
        'normalized': 0,
        'failed': 0,
    }

    table = adapter.table
    table_config = config.table(table)
    policy = policy or config.policy
    key_fields = key_fields if key_fields is not None else table_config.key_fields
    schema_cache = schema_cache or SchemaCache()
    topic = config.topic_for(table)

    start_time = datetime.now(timezone.utc)

    logger.info(
        "Starting normalizer service",
        extra={
            'table': table,
            'topic': topic,
            'policy': policy.value,
            'key_fields': key_fields,
            'limit': limit,
        }
    )

    for raw in adapter.iter_records():
        if limit is not None and stats['fetched'] >= limit:
            break
        stats['fetched'] += 1

        try:
            schema = schema_cache.schema_for(table, raw.payload, policy)
            normalized = normalize_record(raw.payload, policy, key_fields, schema=schema)
            updated_at = extract_updated_at(raw.payload, table_config.timestamp_field)

            output.write(json.dumps(to_message(topic, normalized, updated_at), ensure_ascii=False))
            output.write("\n")
            stats['normalized'] += 1

            logger.debug(
                "Normalized record",
                extra={'table': table, 'sys_id': raw.sys_id}
            )

        except NormalizationError as e:
            stats['failed'] += 1
            logger.warning(
                "Failed to normalize record",
                extra={
                    'table': table,
                    'sys_id': raw.sys_id,
                    'error': str(e),
                    'error_type': type(e).__name__,
                }
            )
            # Continue processing other records

    duration = (datetime.now(timezone.utc) - start_time).total_seconds()

    logger.info(
        "Normalizer service completed",
        extra={
            'duration_seconds': duration,
            'fetched': stats['fetched'],
            'normalized': stats['normalized'],
            'failed': stats['failed'],
        }
    )

    return stats


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the normalizer service.

    Returns:
        Exit code (0 = success, 1 = partial failure, 2 = fatal error)
    """
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )

    # Set logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.debug("Debug logging enabled")

    output: Optional[TextIO] = None
    try:
        config = load_connector_config(args.config_path or os.getenv('CONNECTOR_CONFIG'))

        policy = None
        if args.display_value is not None:
            policy = FlatteningPolicy.from_display_value_mode(args.display_value)

        key_fields = None
        if args.key_fields is not None:
            key_fields = comma_delimited_to_list(args.key_fields)

        table_config = config.tables.get(args.table)
        if table_config is not None and not table_config.enabled:
            logger.warning(f"Table '{args.table}' is disabled in connector configuration")
            return 0

        adapter = JsonlFileAdapter(args.table, args.input_path)
        output = open(args.output_path, 'w', encoding='utf-8') if args.output_path else sys.stdout

        stats = run_normalizer(
            adapter=adapter,
            config=config,
            output=output,
            policy=policy,
            key_fields=key_fields,
            limit=args.limit,
        )

        # Determine exit code based on results
        if stats['failed'] > 0:
            logger.warning(f"Completed with errors: {stats['failed']} failed")
            return 1  # Partial failure

        if stats['normalized'] == 0:
            logger.warning("No records were normalized")
            return 0  # Success but nothing to do

        logger.info("Normalizer completed successfully")
        return 0  # Success

    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Fatal error: {e}")
        return 2  # Fatal error

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # Standard Unix exit code for SIGINT

    except Exception as e:
        logger.error(
            "Unexpected fatal error",
            extra={
                'error': str(e),
                'error_type': type(e).__name__,
            },
            exc_info=True
        )
        return 2  # Fatal error

    finally:
        if output is not None and output is not sys.stdout:
            output.close()


if __name__ == '__main__':
    sys.exit(main())
