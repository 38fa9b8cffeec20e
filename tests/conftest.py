"""
Shared test fixtures for the guardcmd test suite.
"""

import pytest

from guardcmd.core.settings import ParserSettings
from guardcmd.parsing.parser import DocumentParser


@pytest.fixture
def parser():
    """Parser with default settings."""
    return DocumentParser()


@pytest.fixture
def shallow_parser():
    """Parser that allows only two levels of parenthesized groups."""
    return DocumentParser(ParserSettings(max_depth=2))
