"""Bulk division migration for digital repository records.

The ``move_division`` command lives in :mod:`divmover.cli`; the repository
contract and its clients live in :mod:`divmover.repository`.
"""

__all__: list[str] = []
