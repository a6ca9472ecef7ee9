"""
Quick-entry flow: one score for one player, typed directly or taken from the calculator.
"""

import re

import structlog

from scorepad.logic.calculator import Calculator, to_points
from scorepad.logic.ledger import RoundLedger

logger = structlog.get_logger()

_POINTS_PATTERN = re.compile(r"^[+-]?\d+$")


def parse_points(text: str) -> int | None:
    """Parse a signed whole number of points. Returns None for malformed input."""
    if not isinstance(text, str):
        return None
    stripped = text.strip()
    if not _POINTS_PATTERN.match(stripped):
        return None
    return int(stripped)


class QuickEntry:
    """Score form backed by its own calculator."""

    def __init__(self, ledger: RoundLedger) -> None:
        self._ledger = ledger
        self.calculator = Calculator()

    def calculator_points(self) -> int | None:
        """
        Points to copy from the calculator display into the score field.

        None when the display shows the error marker or an untouched "0".
        """
        result = self.calculator.get_result()
        if result == "0":
            return None
        return to_points(result)

    def submit(self, player_id: int, points_text: str) -> bool:
        """Record typed points for a player. False for malformed points or an unknown player."""
        points = parse_points(points_text)
        if points is None:
            logger.info("rejected malformed points input", player_id=player_id)
            return False
        return self._ledger.add_score(player_id, points)
