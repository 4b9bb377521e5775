"""Test configuration loader."""

import pytest
from pathlib import Path

from motion_notify.domain.exceptions import ConfigurationError
from motion_notify.infrastructure.config import ConfigLoader, UploaderSettings


ENV_VARS = [
    "B2_KEY", "B2_SECRET", "B2_BUCKET", "B2_ENDPOINT", "B2_REGION",
    "MOTION_NOTIFY_ENDPOINT", "MOTION_NOTIFY_PID", "MOTION_NOTIFY_LOG",
    "MOTION_NOTIFY_RETRY_ATTEMPTS", "MOTION_NOTIFY_RETRY_INTERVAL", "MOTION_NOTIFY_RECLAIM_STALE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "b2.yaml"
    path.write_text(
        "b2:\n"
        "  key_id: file-key\n"
        "  application_key: file-secret\n"
        "  bucket: pictures\n"
    )
    return path


class TestLoadCredentials:
    """Test credential loading."""

    def test_from_b2_section(self, config_file):
        creds = ConfigLoader(config_file).load_credentials()

        assert creds.key_id == "file-key"
        assert creds.application_key == "file-secret"
        assert creds.bucket == "pictures"
        assert creds.endpoint == "https://s3.us-west-004.backblazeb2.com"

    def test_from_top_level(self, tmp_path):
        path = tmp_path / "flat.yaml"
        path.write_text("key_id: k\napplication_key: s\nbucket: b\nendpoint: https://s3.example.com\n")

        creds = ConfigLoader(path).load_credentials()

        assert creds.endpoint == "https://s3.example.com"

    def test_env_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv("B2_BUCKET", "env-bucket")
        monkeypatch.setenv("B2_REGION", "us-west-004")

        creds = ConfigLoader(config_file).load_credentials()

        assert creds.bucket == "env-bucket"
        assert creds.region == "us-west-004"
        assert creds.key_id == "file-key"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            ConfigLoader(tmp_path / "absent.yaml").load_credentials()

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("key_id: [unclosed\n")

        with pytest.raises(ConfigurationError):
            ConfigLoader(path).load_credentials()

    def test_incomplete_credentials(self, tmp_path):
        path = tmp_path / "partial.yaml"
        path.write_text("key_id: k\n")

        with pytest.raises(ConfigurationError, match="incomplete"):
            ConfigLoader(path).load_credentials()


class TestLoadSettings:
    """Test settings merging and validation."""

    def test_defaults(self, config_file):
        settings = ConfigLoader(config_file).load_settings({"folder_id": "folder123"})

        assert settings.folder_id == "folder123"
        assert settings.config_path == config_file
        assert settings.endpoint == "http://localhost:8787"
        assert settings.unlink is True
        assert settings.retry_attempts == 5
        assert settings.retry_interval == 1.0
        assert settings.poll_interval == 1.0
        assert settings.pid_path is None

    def test_env_settings(self, config_file, monkeypatch):
        monkeypatch.setenv("MOTION_NOTIFY_ENDPOINT", "http://127.0.0.1:9000")
        monkeypatch.setenv("MOTION_NOTIFY_PID", "/run/motion-notify.pid")
        monkeypatch.setenv("MOTION_NOTIFY_RECLAIM_STALE", "yes")

        settings = ConfigLoader(config_file).load_settings({"folder_id": "f"})

        assert settings.endpoint == "http://127.0.0.1:9000"
        assert settings.pid_path == Path("/run/motion-notify.pid")
        assert settings.reclaim_stale_marker is True

    def test_overrides_beat_env(self, config_file, monkeypatch):
        monkeypatch.setenv("MOTION_NOTIFY_ENDPOINT", "http://127.0.0.1:9000")

        settings = ConfigLoader(config_file).load_settings(
            {"folder_id": "f", "endpoint": "http://127.0.0.1:9100", "pid_path": None}
        )

        assert settings.endpoint == "http://127.0.0.1:9100"

    def test_invalid_env_number_ignored(self, config_file, monkeypatch):
        monkeypatch.setenv("MOTION_NOTIFY_RETRY_ATTEMPTS", "many")

        settings = ConfigLoader(config_file).load_settings({"folder_id": "f"})

        assert settings.retry_attempts == 5

    def test_folder_id_required(self, config_file):
        with pytest.raises(ConfigurationError, match="--folder-id"):
            ConfigLoader(config_file).load_settings({})

    def test_config_required(self):
        with pytest.raises(ConfigurationError, match="--config"):
            ConfigLoader().load_settings({"folder_id": "f"})


@pytest.mark.parametrize("field,value", [
    ("retry_attempts", 0),
    ("retry_interval", -1.0),
    ("poll_interval", 0),
])
def test_settings_validation(field, value):
    with pytest.raises(ConfigurationError):
        UploaderSettings(folder_id="f", config_path=Path("c.yaml"), **{field: value})
