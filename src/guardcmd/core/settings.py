"""
Parser configuration for the guardcmd library.
"""

from pydantic import BaseModel, ConfigDict, Field

from guardcmd.exceptions.core import ErrorLevel

# Each nested group costs three parser frames; stay well inside the default
# interpreter recursion limit of 1000.
MAX_NESTING_DEPTH = 200


class ParserSettings(BaseModel):
    """
    Options controlling a DocumentParser.

    Params:
        max_depth: Maximum nesting of parenthesized groups before NestingTooDeep is raised
        error_level: Detail level of rendered syntax error messages
    """

    model_config = ConfigDict(frozen=True)

    max_depth: int = Field(default=64, ge=1, le=MAX_NESTING_DEPTH)
    error_level: ErrorLevel = ErrorLevel.USER
