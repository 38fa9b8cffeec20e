"""
Guarded command DSL parsing components.

This package provides the lexical scanner and the recursive-descent document
parser for the guardcmd library.
"""

from guardcmd.parsing.parser import DocumentParser, parse_document
from guardcmd.parsing.scanner import SourceScanner

__all__ = [
    "DocumentParser",
    "SourceScanner",
    "parse_document",
]
