import pytest
from pydantic import ValidationError

from scorepad.app.settings import ScorepadSettings, StorageBackend


class TestScorepadSettings:
    def test_defaults(self, monkeypatch):
        for name in ("SCOREPAD_STORAGE_BACKEND", "SCOREPAD_DATA_DIR", "SCOREPAD_NAMESPACE", "SCOREPAD_LOG_DIR"):
            monkeypatch.delenv(name, raising=False)
        settings = ScorepadSettings()

        assert settings.storage_backend is StorageBackend.FILE
        assert settings.data_dir == "backend/data/scorepad"
        assert settings.namespace == "flip7"
        assert settings.log_dir is None

    def test_reads_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SCOREPAD_STORAGE_BACKEND", "memory")
        monkeypatch.setenv("SCOREPAD_NAMESPACE", "family_night")
        settings = ScorepadSettings()

        assert settings.storage_backend is StorageBackend.MEMORY
        assert settings.namespace == "family_night"

    def test_invalid_backend_rejected(self):
        with pytest.raises(ValidationError, match="storage_backend"):
            ScorepadSettings(storage_backend="redis")

    def test_namespace_with_separator_rejected(self):
        with pytest.raises(ValidationError, match="namespace"):
            ScorepadSettings(namespace="../etc")

    def test_data_dir_empty_rejected(self):
        with pytest.raises(ValidationError, match="data_dir"):
            ScorepadSettings(data_dir="")

    def test_blank_log_dir_means_none(self):
        assert ScorepadSettings(log_dir="  ").log_dir is None
