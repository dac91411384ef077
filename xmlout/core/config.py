"""
Environment-driven defaults for XML output.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

from ..output.types import FormatConfig


LINE_SEPARATORS = {
    "lf": "\n",
    "crlf": "\r\n",
    "cr": "\r",
}


class OutputSettings(BaseSettings):
    # Indentation
    indent: str = ""
    indent_size: Optional[int] = None  # Overrides indent with that many spaces
    indenting: bool = True

    # Line breaks
    newlines: bool = False
    line_separator: str = "crlf"  # lf, crlf, cr or the literal separator

    # Declaration
    encoding: str = "UTF-8"
    suppress_declaration: bool = False
    omit_encoding: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json or console

    def to_format_config(self) -> FormatConfig:
        """Build the FormatConfig these settings describe."""
        config = FormatConfig(
            indent=self.indent,
            indenting=self.indenting,
            newlines=self.newlines,
            line_separator=LINE_SEPARATORS.get(self.line_separator.lower(), self.line_separator),
            encoding=self.encoding,
            suppress_declaration=self.suppress_declaration,
            omit_encoding=self.omit_encoding,
        )
        if self.indent_size is not None:
            config = config.with_indent_size(self.indent_size)
        return config

    class Config:
        env_prefix = "XMLOUT_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> OutputSettings:
    return OutputSettings()
