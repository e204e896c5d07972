"""
Parsing of French-formatted numbers.

Ratings and evaluation counts are displayed with a space (or a no-break space)
as thousands separator and a comma as decimal separator, e.g. ``1 234,5``.
"""

import logging
import re
from typing import Tuple

from domain.errors import FormatError

# Get logger for this module
logger = logging.getLogger(__name__)

THOUSANDS_SEPARATORS = " \u00a0\u202f"
DECIMAL_SEPARATOR = ","

_GROUPED = rf"\d{{1,3}}(?:[{THOUSANDS_SEPARATORS}]\d{{3}})+"
NUMBER_PATTERN = re.compile(
    rf"(?P<integer>{_GROUPED}|\d+)(?:{DECIMAL_SEPARATOR}(?P<fraction>\d+))?"
)


class NumberParser:
    """Parses locale-formatted decimal strings into numeric values."""

    def parse(self, text: str) -> float:
        """
        Parse a locale-formatted number.

        Args:
            text: Text such as ``"7,5"`` or ``"1 234,5"``

        Returns:
            The numeric value as a float

        Raises:
            FormatError: If the text does not follow the locale grammar
        """
        integer, fraction = self._split(text)
        literal = f"{integer}.{fraction}" if fraction else integer
        value = float(literal)
        logger.debug("Parsed %r as %s", text, value)
        return value

    def parse_int(self, text: str) -> int:
        """Parse a locale-formatted integer; a fractional part is rejected."""
        integer, fraction = self._split(text)
        if fraction:
            raise FormatError(text)
        return int(integer)

    def _split(self, text: str) -> Tuple[str, str]:
        """Validate the text and return its integer digits and fraction digits."""
        if text is None:
            raise FormatError("")
        match = NUMBER_PATTERN.fullmatch(text.strip())
        if not match:
            raise FormatError(text)
        integer = re.sub(f"[{THOUSANDS_SEPARATORS}]", "", match.group("integer"))
        return integer, match.group("fraction") or ""
