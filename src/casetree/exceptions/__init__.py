"""
casetree exception classes.

This package provides all exception types used throughout casetree for
consistent error handling and reporting.
"""

from casetree.exceptions.core import (
    CaseTreeError,
    DeclarationError,
    ExpectationError,
    PendingError,
    TaskTimeoutError,
)

__all__ = [
    "CaseTreeError",
    "DeclarationError",
    "ExpectationError",
    "PendingError",
    "TaskTimeoutError",
]
