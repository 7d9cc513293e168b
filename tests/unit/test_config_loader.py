"""
Unit tests for settings loading.
"""

import pytest
import yaml

from mlr_citations.config.loader import ENV_BRAND_ID, ENV_DATABASE_PATH, load_settings, substitute_env_vars


class TestLoadSettings:
    """Test load_settings."""

    def test_load_settings_file(self, tmp_path, monkeypatch):
        monkeypatch.delenv(ENV_DATABASE_PATH, raising=False)
        monkeypatch.delenv(ENV_BRAND_ID, raising=False)
        settings_file = tmp_path / "settings.yaml"
        settings_file.write_text(
            yaml.dump(
                {
                    "database_path": str(tmp_path / "ev.db"),
                    "default_brand_id": "ofev",
                    "validation": {"default_asset_type": "banner"},
                }
            )
        )

        settings = load_settings(str(settings_file))

        assert settings.database_path == str(tmp_path / "ev.db")
        assert settings.default_brand_id == "ofev"
        assert settings.validation.default_asset_type == "banner"
        assert settings.validation.default_audience == "hcp"
        assert settings.logging.level == "normal"

    def test_defaults_without_file(self, monkeypatch):
        monkeypatch.delenv(ENV_DATABASE_PATH, raising=False)
        monkeypatch.delenv(ENV_BRAND_ID, raising=False)
        settings = load_settings(None)
        assert settings.database_path == "data/evidence.db"
        assert settings.default_brand_id is None

    def test_env_overrides(self, tmp_path, monkeypatch):
        settings_file = tmp_path / "settings.yaml"
        settings_file.write_text("database_path: from_file.db\ndefault_brand_id: file-brand\n")
        monkeypatch.setenv(ENV_DATABASE_PATH, "from_env.db")
        monkeypatch.setenv(ENV_BRAND_ID, "env-brand")

        settings = load_settings(str(settings_file))

        assert settings.database_path == "from_env.db"
        assert settings.default_brand_id == "env-brand"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(str(tmp_path / "nope.yaml"))

    def test_non_mapping_root(self, tmp_path):
        settings_file = tmp_path / "settings.yaml"
        settings_file.write_text("- a\n- b\n")
        with pytest.raises(ValueError):
            load_settings(str(settings_file))


class TestSubstituteEnvVars:
    def test_nested_substitution(self, monkeypatch):
        monkeypatch.setenv("EVIDENCE_DIR", "/srv/evidence")
        value = {"paths": ["${EVIDENCE_DIR}/a.db", "${UNSET_VAR_XYZ}"], "n": 3}
        assert substitute_env_vars(value) == {
            "paths": ["/srv/evidence/a.db", "${UNSET_VAR_XYZ}"],
            "n": 3,
        }
