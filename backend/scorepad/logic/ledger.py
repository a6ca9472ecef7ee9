"""
Round ledger: players, append-only round history and their persistence.

Invariant: every player's ``score`` equals the sum of ``points`` over the
round entries carrying that player's id. The round counter is shared by all
players and grows by one on every successful ``add_score``.

State is persisted to a key-value store after each mutation. Write failures
are logged and swallowed; the in-memory state stays authoritative. On load the
players and rounds keys are taken together: if either cannot be read or
validated, both are discarded and the ledger starts empty.
"""

import time
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

import structlog
from pydantic import TypeAdapter, ValidationError

from scorepad.logic.enums import StorageKey
from scorepad.logic.types import Player, PlayerList, RoundEntry, RoundEntryList
from shared.storage import KeyValueStore

logger = structlog.get_logger()


def _utc_now() -> datetime:
    return datetime.now(UTC)


def _wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


class IdGenerator:
    """
    Monotonic integer ids derived from the wall clock.

    Uses the current time in milliseconds, bumped past the last issued id when
    the clock has not advanced, so two ids issued in the same tick never collide.
    """

    def __init__(self, clock_ms: Callable[[], int] = _wall_clock_ms, last_id: int = 0) -> None:
        self._clock_ms = clock_ms
        self._last_id = last_id

    def observe(self, ids: Iterable[int]) -> None:
        """Make sure future ids are greater than every id in ids."""
        self._last_id = max([self._last_id, *ids])

    def next_id(self) -> int:
        self._last_id = max(self._clock_ms(), self._last_id + 1)
        return self._last_id


class RoundLedger:
    """Owns players and round history for one sitting."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        clock: Callable[[], datetime] = _utc_now,
        id_generator: IdGenerator | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._ids = id_generator or IdGenerator()
        self._players: list[Player] = []
        self._rounds: list[RoundEntry] = []
        self._round_counter = 0
        self._load()

    @property
    def players(self) -> tuple[Player, ...]:
        """Players in insertion order."""
        return tuple(self._players)

    @property
    def round_counter(self) -> int:
        return self._round_counter

    def get_player(self, player_id: int) -> Player | None:
        return next((p for p in self._players if p.id == player_id), None)

    def add_player(self, name: str) -> Player | None:
        """Create a player with score 0. Returns None when the trimmed name is empty."""
        name = name.strip() if isinstance(name, str) else ""
        if not name:
            logger.info("rejected player with empty name")
            return None

        player = Player(id=self._ids.next_id(), name=name, score=0, created_at=self._clock())
        self._players.append(player)
        logger.info("added player", player_id=player.id, name=player.name)
        self._persist(StorageKey.PLAYERS)
        return player

    def remove_player(self, player_id: int) -> bool:
        """
        Remove a player if present. Returns whether anything was removed.

        Round entries that reference the player are kept with their name snapshot.
        """
        remaining = [p for p in self._players if p.id != player_id]
        if len(remaining) == len(self._players):
            return False
        self._players = remaining
        logger.info("removed player", player_id=player_id)
        self._persist(StorageKey.PLAYERS)
        return True

    def add_score(self, player_id: int, points: int) -> bool:
        """
        Add points (possibly negative or zero) to a player and record a round entry.

        Returns False for an unknown player or non-integer points.
        """
        if isinstance(points, bool) or not isinstance(points, int):
            logger.info("rejected malformed points", player_id=player_id, points=repr(points))
            return False
        index = next((i for i, p in enumerate(self._players) if p.id == player_id), None)
        if index is None:
            logger.info("rejected score for unknown player", player_id=player_id)
            return False

        player = self._players[index]
        self._players[index] = player.model_copy(update={"score": player.score + points})
        self._round_counter += 1
        entry = RoundEntry(
            id=self._ids.next_id(),
            player_id=player.id,
            player_name=player.name,
            points=points,
            timestamp=self._clock(),
            round_number=self._round_counter,
        )
        self._rounds.append(entry)
        logger.info("recorded score", player_id=player.id, points=points, round_number=entry.round_number)
        self._persist(StorageKey.PLAYERS, StorageKey.ROUNDS)
        return True

    def get_scoreboard(self) -> list[Player]:
        """Players by descending score; equal scores keep insertion order."""
        return sorted(self._players, key=lambda p: p.score, reverse=True)

    def get_round_history(self) -> list[RoundEntry]:
        """All round entries, most recent first."""
        return list(reversed(self._rounds))

    def new_game(self) -> None:
        """Drop all players and history and reset the round counter."""
        self._players = []
        self._rounds = []
        self._round_counter = 0
        logger.info("started new game")
        self._persist(StorageKey.PLAYERS, StorageKey.ROUNDS)

    def _load(self) -> None:
        players = self._load_key(StorageKey.PLAYERS, PlayerList)
        rounds = self._load_key(StorageKey.ROUNDS, RoundEntryList)
        if players is None or rounds is None:
            # scores are only consistent with the history they were built from
            logger.warning(
                "discarding ledger snapshot",
                players_ok=players is not None,
                rounds_ok=rounds is not None,
            )
            players, rounds = [], []
        self._players = players
        self._rounds = rounds
        self._round_counter = max((r.round_number for r in self._rounds), default=0)
        self._ids.observe(p.id for p in self._players)
        self._ids.observe(r.id for r in self._rounds)
        if self._players or self._rounds:
            logger.info(
                "loaded ledger",
                players=len(self._players),
                rounds=len(self._rounds),
                round_counter=self._round_counter,
            )

    def _load_key(self, key: StorageKey, adapter: TypeAdapter) -> list | None:
        """Read and validate one key. Missing keys are empty; unreadable or malformed ones give None."""
        try:
            raw = self._store.get(key.value)
        except (OSError, ValueError):
            logger.warning("failed to read ledger snapshot", key=key, exc_info=True)
            return None
        if raw is None:
            return []
        try:
            return adapter.validate_json(raw)
        except ValidationError:
            logger.warning("discarding malformed ledger snapshot", key=key, exc_info=True)
            return None

    def _persist(self, *keys: StorageKey) -> None:
        for key in keys:
            items = self._players if key is StorageKey.PLAYERS else self._rounds
            adapter = PlayerList if key is StorageKey.PLAYERS else RoundEntryList
            try:
                self._store.set(key.value, adapter.dump_json(items, by_alias=True).decode("utf-8"))
            except (OSError, ValueError):
                logger.warning("failed to persist ledger snapshot", key=key, exc_info=True)
