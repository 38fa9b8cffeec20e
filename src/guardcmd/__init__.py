"""
guardcmd - A parser for guarded, boolean-composable command documents

guardcmd turns DSL text such as ``ci; os=linux: build(fast) && {notify team}``
into an immutable syntax tree. Evaluating modifiers or running commands is left
to the caller.
"""

from importlib.metadata import version

from guardcmd.core.nodes import Document
from guardcmd.core.settings import ParserSettings
from guardcmd.exceptions.core import DSLSyntaxError, GuardCmdDSLError
from guardcmd.parsing.parser import DocumentParser, parse_document

__version__ = version("guardcmd")

__all__ = [
    "__version__",
    "Document",
    "DocumentParser",
    "DSLSyntaxError",
    "GuardCmdDSLError",
    "ParserSettings",
    "parse_document",
]
