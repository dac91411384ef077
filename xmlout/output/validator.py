"""
Well-formedness checks for serialized XML using lxml.
"""

import time
from pathlib import Path
from typing import Optional, Union

import structlog
from lxml import etree

from .types import ValidationResult


logger = structlog.get_logger(__name__)


class WellFormednessChecker:
    """
    Parses serialized output back with lxml and reports syntax errors.

    Only well-formedness is checked; DTDs and schemas are not consulted.
    """

    def __init__(self):
        self.logger = logger.bind(component="WellFormednessChecker")
        self._stats = {
            "total_checks": 0,
            "passed_checks": 0,
            "failed_checks": 0,
        }

    def check_bytes(self, xml_content: bytes, encoding: Optional[str] = None) -> ValidationResult:
        """
        Check encoded XML output.

        Args:
            xml_content: XML content as bytes
            encoding: Overrides the encoding the content declares

        Returns:
            Result with the parser's errors, if any
        """
        start_time = time.time()
        parser = etree.XMLParser(
            resolve_entities=False, no_network=True, recover=False, encoding=encoding
        )

        result = ValidationResult(is_valid=True)
        try:
            etree.fromstring(xml_content, parser)
        except etree.XMLSyntaxError as e:
            result.add_error(
                message=f"XML parsing error: {e.msg}",
                line=e.lineno,
                column=e.offset
            )
            self.logger.debug("XML parse error",
                              message=e.msg,
                              line=e.lineno,
                              column=e.offset)

        result.validation_time = time.time() - start_time
        self._update_stats(result)
        return result

    def check_string(self, xml_content: str) -> ValidationResult:
        """Check XML text regardless of the encoding it declares."""
        return self.check_bytes(xml_content.encode("utf-8"), encoding="utf-8")

    def check_file(self, xml_path: Union[str, Path]) -> ValidationResult:
        try:
            xml_content = Path(xml_path).read_bytes()
        except OSError as e:
            self.logger.error("Error reading XML file", path=str(xml_path), error=str(e))
            result = ValidationResult(is_valid=False)
            result.add_error(f"Failed to read XML file: {e}")
            return result

        return self.check_bytes(xml_content)

    def _update_stats(self, result: ValidationResult) -> None:
        self._stats["total_checks"] += 1
        if result.is_valid:
            self._stats["passed_checks"] += 1
        else:
            self._stats["failed_checks"] += 1

    def get_stats(self) -> dict:
        return self._stats.copy()
