"""ServiceNow Ingestion Test Suite.

This package contains unit and integration tests for the connector services.

Test Structure:
- unit/: Unit tests for individual functions and classes
- integration/: End-to-end runs of the normalizer CLI on temporary files
"""
