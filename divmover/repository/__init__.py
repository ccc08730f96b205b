"""Repository contract and clients."""

from .base import Dataset, Record, ResultSet, SearchFilter, Session, search
from .http import HttpSession
from .local import LocalSession
from .session import create_session, open_session

__all__ = [
    "Session",
    "Dataset",
    "ResultSet",
    "Record",
    "SearchFilter",
    "search",
    "LocalSession",
    "HttpSession",
    "create_session",
    "open_session",
]
