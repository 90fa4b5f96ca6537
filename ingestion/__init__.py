"""ServiceNow Ingestion Package.

This package contains the services of the ServiceNow ingestion connector:
- source_extractor: Reads raw Table API records and connector configuration
- normalizer: Normalizes raw records into typed value and key records
"""

__version__ = "0.1.0"
