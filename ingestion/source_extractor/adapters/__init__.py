"""Record Source Adapters.

This package contains concrete implementations of the SourceAdapter interface.

Available adapters:
- JsonlFileAdapter: Records exported as JSON Lines (jsonl_adapter.py)
"""

from .jsonl_adapter import JsonlFileAdapter

__all__ = ["JsonlFileAdapter"]
