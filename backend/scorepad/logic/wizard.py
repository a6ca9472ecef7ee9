"""
Round-entry wizard: walk the roster one player at a time, then commit the round.

The roster is snapshotted when the wizard is created and never changes for its
lifetime. Each step uses the same calculator, cleared whenever the cursor moves.
Scores are held per roster position until ``finish()`` sends the non-zero ones
to the ledger in roster order.

Saving policy: ``auto_save()`` (the courtesy save before navigating) skips a
zero result, so revisiting a step and leaving it untouched keeps the score
entered earlier. ``commit_current_entry()`` stores whatever the calculator
shows, zero included.
"""

from collections.abc import Sequence

import structlog

from scorepad.logic.calculator import Calculator, to_points
from scorepad.logic.ledger import RoundLedger
from scorepad.logic.types import Player, WizardProgress

logger = structlog.get_logger()


class RoundEntryWizard:
    """Linear per-player score entry for one round."""

    def __init__(self, ledger: RoundLedger, roster: Sequence[Player] | None = None) -> None:
        self._ledger = ledger
        self._roster: tuple[Player, ...] = tuple(roster) if roster is not None else ledger.players
        self._cursor = 0
        self._scores: dict[int, int] = {}
        self.calculator = Calculator()

    @property
    def roster(self) -> tuple[Player, ...]:
        return self._roster

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current_player(self) -> Player | None:
        if not self._roster:
            return None
        return self._roster[self._cursor]

    @property
    def current_score(self) -> int:
        return self._scores.get(self._cursor, 0)

    @property
    def scores(self) -> list[tuple[Player, int]]:
        """Roster-ordered (player, score) pairs; unvisited steps score 0."""
        return [(player, self._scores.get(i, 0)) for i, player in enumerate(self._roster)]

    def is_stale(self) -> bool:
        """True when the ledger's players no longer match the roster snapshot."""
        return tuple(p.id for p in self._ledger.players) != tuple(p.id for p in self._roster)

    def advance(self) -> bool:
        if self._cursor >= len(self._roster) - 1:
            return False
        self._cursor += 1
        self.calculator.clear()
        return True

    def retreat(self) -> bool:
        if self._cursor <= 0:
            return False
        self._cursor -= 1
        self.calculator.clear()
        return True

    def commit_current_entry(self) -> bool:
        """
        Store the rounded calculator result as the current player's score.

        Returns False (nothing stored) for an empty roster or the error marker.
        """
        if not self._roster:
            return False
        points = to_points(self.calculator.get_result())
        if points is None:
            logger.debug("discarded calculator error", cursor=self._cursor)
            return False
        self._scores[self._cursor] = points
        return True

    def auto_save(self) -> bool:
        """Store the current result only if it is a non-zero number."""
        if not self._roster:
            return False
        points = to_points(self.calculator.get_result())
        if not points:
            return False
        self._scores[self._cursor] = points
        return True

    def finish(self) -> int:
        """
        Send every non-zero score to the ledger, then reset to the first step.

        Returns the number of entries the ledger accepted.
        """
        self.auto_save()
        applied = 0
        for index, player in enumerate(self._roster):
            points = self._scores.get(index, 0)
            if points == 0:
                continue
            if self._ledger.add_score(player.id, points):
                applied += 1
            else:
                logger.warning("skipped score for player no longer in ledger", player_id=player.id, points=points)
        logger.info("finished round entry", applied=applied, roster_size=len(self._roster))
        self.reset()
        return applied

    def reset(self) -> None:
        self._cursor = 0
        self._scores = {}
        self.calculator.clear()

    def get_progress(self) -> WizardProgress:
        if not self._roster:
            return WizardProgress(step=0, total=0)
        return WizardProgress(step=self._cursor + 1, total=len(self._roster))
