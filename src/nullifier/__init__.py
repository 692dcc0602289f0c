"""Nullifier: automatic nullable-reference fixes driven by compiler diagnostics."""

from nullifier._version import __version__
from nullifier.diagnostics.parser import parse_diagnostic, parse_diagnostics
from nullifier.fix.engine import FixEngine

__all__ = [
    "__version__",
    "parse_diagnostic",
    "parse_diagnostics",
    "FixEngine",
]
