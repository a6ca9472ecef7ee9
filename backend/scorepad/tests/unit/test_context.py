"""
Tests for the scorepad composition root.
"""

import json

from scorepad.app.context import build_context, create_store
from scorepad.app.settings import ScorepadSettings, StorageBackend
from shared.storage import InMemoryKeyValueStore, LocalKeyValueStore


def _memory_settings() -> ScorepadSettings:
    return ScorepadSettings(storage_backend=StorageBackend.MEMORY)


class TestCreateStore:
    def test_memory_backend(self):
        store = create_store(_memory_settings())
        assert isinstance(store, InMemoryKeyValueStore)
        assert store.namespace == "flip7"

    def test_file_backend(self, tmp_path):
        settings = ScorepadSettings(storage_backend=StorageBackend.FILE, data_dir=str(tmp_path), namespace="club")
        store = create_store(settings)

        assert isinstance(store, LocalKeyValueStore)
        assert store.directory == tmp_path.resolve()
        assert store.namespace == "club"


class TestBuildContext:
    def test_wires_components_on_one_ledger(self):
        context = build_context(_memory_settings(), configure_logging=False)

        assert context.quick_entry._ledger is context.ledger
        assert context.wizard is None

    def test_uses_given_store(self):
        store = InMemoryKeyValueStore()
        context = build_context(_memory_settings(), store=store, configure_logging=False)

        context.ledger.add_player("Alice")
        assert json.loads(store.get("players"))[0]["name"] == "Alice"

    def test_file_backed_context_survives_restart(self, tmp_path):
        settings = ScorepadSettings(storage_backend=StorageBackend.FILE, data_dir=str(tmp_path))
        first = build_context(settings, configure_logging=False)
        player = first.ledger.add_player("Alice")
        first.quick_entry.submit(player.id, "12")

        second = build_context(settings, configure_logging=False)

        assert second.ledger.get_player(player.id).score == 12
        assert (tmp_path / "flip7_players.json").exists()
        assert (tmp_path / "flip7_rounds.json").exists()

    def test_configures_logging_by_default(self, monkeypatch):
        calls = []
        monkeypatch.setattr("scorepad.app.context.setup_logging", lambda log_dir=None: calls.append(log_dir))

        build_context(_memory_settings())

        assert calls == [None]


class TestWizardForRound:
    def test_reuses_wizard_while_roster_unchanged(self):
        context = build_context(_memory_settings(), configure_logging=False)
        context.ledger.add_player("A")

        wizard = context.wizard_for_round()
        assert context.wizard_for_round() is wizard

    def test_recreates_wizard_after_roster_change(self):
        context = build_context(_memory_settings(), configure_logging=False)
        context.ledger.add_player("A")
        wizard = context.wizard_for_round()

        context.ledger.add_player("B")
        fresh = context.wizard_for_round()

        assert fresh is not wizard
        assert [p.name for p in fresh.roster] == ["A", "B"]

    def test_new_game_discards_wizard(self, press_keys):
        context = build_context(_memory_settings(), configure_logging=False)
        player = context.ledger.add_player("A")
        context.ledger.add_score(player.id, 5)
        context.wizard_for_round()
        press_keys(context.quick_entry.calculator, "9")

        context.new_game()

        assert context.wizard is None
        assert context.ledger.players == ()
        assert context.quick_entry.calculator.get_result() == "0"
