import logging

import pytest

from taskapi.config.firebase_config import get_firebase_credentials, init_firebase
from taskapi.config.settings import Settings
from taskapi.utils.logger import configure_logging


class TestSettings:

    def test_flask_config_contains_settings(self):
        config = Settings.as_flask_config()
        assert "JWT_SECRET" in config
        assert "TASK_ID_TIMEZONE" in config
        assert "validate" not in config

    def test_validate_requires_jwt_secret(self, monkeypatch):
        monkeypatch.setattr(Settings, "JWT_SECRET", None)
        monkeypatch.setattr(Settings, "DEV_MODE", True)

        with pytest.raises(ValueError, match="JWT_SECRET"):
            Settings.validate()

    def test_validate_rejects_short_secret(self, monkeypatch):
        monkeypatch.setattr(Settings, "JWT_SECRET", "short")
        monkeypatch.setattr(Settings, "DEV_MODE", True)

        with pytest.raises(ValueError, match="at least 32"):
            Settings.validate()

    def test_validate_requires_project_outside_dev_mode(self, monkeypatch):
        monkeypatch.setattr(Settings, "JWT_SECRET", "x" * 32)
        monkeypatch.setattr(Settings, "DEV_MODE", False)
        monkeypatch.setattr(Settings, "FIREBASE_PROJECT_ID", None)

        with pytest.raises(ValueError, match="FIREBASE_PROJECT_ID"):
            Settings.validate()

    def test_validate_ok(self, monkeypatch):
        monkeypatch.setattr(Settings, "JWT_SECRET", "x" * 32)
        monkeypatch.setattr(Settings, "DEV_MODE", True)
        assert Settings.validate() is True


class TestConfigureLogging:

    def test_file_handlers(self, tmp_path):
        root = configure_logging("DEBUG", str(tmp_path))
        try:
            logging.getLogger("taskapi.test").error("boom")
            for handler in root.handlers:
                handler.flush()

            assert "boom" in (tmp_path / "latest.log").read_text()
            error_logs = list(tmp_path.glob("*/*/error.log"))
            assert len(error_logs) == 1
            assert "boom" in error_logs[0].read_text()
        finally:
            configure_logging("WARNING")

    def test_reconfiguring_does_not_stack_handlers(self):
        configure_logging("INFO")
        configure_logging("INFO")
        ours = [h for h in logging.getLogger().handlers if getattr(h, "_taskapi_handler", False)]
        assert len(ours) == 1


class TestFirebaseCredentials:

    @pytest.fixture(autouse=True)
    def clear_env(self, monkeypatch):
        for name in ("FIREBASE_CREDENTIALS_PATH", "GOOGLE_APPLICATION_CREDENTIALS"):
            monkeypatch.delenv(name, raising=False)

    def test_credentials_file(self, monkeypatch, tmp_path):
        key_file = tmp_path / "key.json"
        key_file.write_text('{"project_id": "from-file"}')
        monkeypatch.setenv("FIREBASE_CREDENTIALS_PATH", str(key_file))
        assert get_firebase_credentials()["project_id"] == "from-file"

    def test_google_application_credentials_fallback(self, monkeypatch, tmp_path):
        key_file = tmp_path / "adc.json"
        key_file.write_text('{"project_id": "from-adc"}')
        monkeypatch.setenv("FIREBASE_CREDENTIALS_PATH", str(tmp_path / "missing.json"))
        monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", str(key_file))
        assert get_firebase_credentials()["project_id"] == "from-adc"

    def test_missing_credentials(self):
        with pytest.raises(ValueError, match="Firebase credentials not found"):
            get_firebase_credentials()

    def test_dev_mode_skips_firebase(self):
        assert init_firebase(dev_mode=True) is False
