"""Source Extractor Service.

This service provides the raw ServiceNow records and the connector settings
the normalizer works from.

Main components:
- SourceAdapter: Abstract base class for record sources
- SourceRecordRaw: Data class for raw Table API records
- Adapters: Concrete sources (in adapters/ directory)
- load_connector_config: YAML connector configuration
"""

from .base import SourceAdapter, SourceRecordRaw
from .source_config import ConnectorConfig, TableConfig, load_connector_config

__all__ = [
    "SourceAdapter",
    "SourceRecordRaw",
    "ConnectorConfig",
    "TableConfig",
    "load_connector_config",
]
__version__ = "0.1.0"
