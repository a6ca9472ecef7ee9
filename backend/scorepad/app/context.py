"""
Composition root for a scorepad session.

The presentation layer builds one ``ScorepadContext`` at startup and passes it
to whatever needs the ledger, the quick-entry form or the round wizard.
"""

from dataclasses import dataclass

import structlog

from scorepad.app.settings import ScorepadSettings, StorageBackend
from scorepad.logic.ledger import RoundLedger
from scorepad.logic.quick_entry import QuickEntry
from scorepad.logic.wizard import RoundEntryWizard
from shared.logging import setup_logging
from shared.storage import InMemoryKeyValueStore, KeyValueStore, LocalKeyValueStore

logger = structlog.get_logger()


@dataclass
class ScorepadContext:
    settings: ScorepadSettings
    store: KeyValueStore
    ledger: RoundLedger
    quick_entry: QuickEntry
    wizard: RoundEntryWizard | None = None

    def wizard_for_round(self) -> RoundEntryWizard:
        """Return the active wizard, recreating it if the roster has changed."""
        if self.wizard is None or self.wizard.is_stale():
            self.wizard = RoundEntryWizard(self.ledger)
            logger.debug("created round wizard", roster_size=len(self.wizard.roster))
        return self.wizard

    def new_game(self) -> None:
        self.ledger.new_game()
        self.quick_entry.calculator.clear()
        self.wizard = None


def create_store(settings: ScorepadSettings) -> KeyValueStore:
    if settings.storage_backend is StorageBackend.MEMORY:
        return InMemoryKeyValueStore(settings.namespace)
    return LocalKeyValueStore(settings.data_dir, settings.namespace)


def build_context(
    settings: ScorepadSettings | None = None,
    *,
    store: KeyValueStore | None = None,
    configure_logging: bool = True,
) -> ScorepadContext:
    """Wire settings, logging, storage and the ledger into a fresh context."""
    settings = settings or ScorepadSettings()
    if configure_logging:
        setup_logging(log_dir=settings.log_dir)
    if store is None:
        store = create_store(settings)
    ledger = RoundLedger(store)
    logger.info(
        "scorepad context ready",
        storage_backend=settings.storage_backend,
        namespace=store.namespace,
        players=len(ledger.players),
    )
    return ScorepadContext(settings=settings, store=store, ledger=ledger, quick_entry=QuickEntry(ledger))
