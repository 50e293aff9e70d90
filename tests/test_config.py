"""Tests for wren.config — AppConfig defaults and environment loading."""

import dataclasses
from pathlib import Path

import pytest

from wren.config import DEFAULT_API_URL, AppConfig
from wren.errors import ConfigurationError


class TestDefaults:
    def test_server_defaults(self) -> None:
        config = AppConfig()
        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.debug is False

    def test_site_defaults(self) -> None:
        config = AppConfig()
        assert config.public_dir == "public"
        assert config.live_reload_path == "/_r"
        assert config.api_url == DEFAULT_API_URL
        assert config.fetch_timeout == 5.0

    def test_markdown_file_derived_from_public_dir(self) -> None:
        assert AppConfig(public_dir="site").markdown_file == Path("site/markdown/test.md")

    def test_explicit_markdown_path(self) -> None:
        assert AppConfig(markdown_path="/tmp/x.md").markdown_file == Path("/tmp/x.md")

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            AppConfig().port = 1  # type: ignore[misc]


class TestFromEnv:
    def test_empty_environment_keeps_defaults(self) -> None:
        assert AppConfig.from_env({}) == AppConfig()

    def test_reads_variables(self) -> None:
        config = AppConfig.from_env(
            {
                "PORT": "3000",
                "HOST": "0.0.0.0",
                "WREN_DEBUG": "yes",
                "WREN_PUBLIC_DIR": "static",
                "WREN_MARKDOWN_PATH": "docs/page.md",
                "WREN_API_URL": "https://api.test/data",
                "WREN_FETCH_TIMEOUT": "1.5",
                "WREN_LOG_LEVEL": "debug",
            }
        )
        assert config.port == 3000
        assert config.host == "0.0.0.0"
        assert config.debug is True
        assert config.public_dir == "static"
        assert config.markdown_file == Path("docs/page.md")
        assert config.api_url == "https://api.test/data"
        assert config.fetch_timeout == 1.5
        assert config.log_level == "debug"

    def test_empty_port_uses_default(self) -> None:
        assert AppConfig.from_env({"PORT": ""}).port == 8080

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "9090")
        assert AppConfig.from_env().port == 9090

    @pytest.mark.parametrize("raw", ["eighty", "80.5"])
    def test_bad_port(self, raw: str) -> None:
        with pytest.raises(ConfigurationError, match="PORT"):
            AppConfig.from_env({"PORT": raw})

    def test_port_out_of_range(self) -> None:
        with pytest.raises(ConfigurationError, match="65535"):
            AppConfig.from_env({"PORT": "70000"})

    def test_bad_timeout(self) -> None:
        with pytest.raises(ConfigurationError, match="WREN_FETCH_TIMEOUT"):
            AppConfig.from_env({"WREN_FETCH_TIMEOUT": "soon"})

    def test_bad_bool(self) -> None:
        with pytest.raises(ConfigurationError, match="WREN_DEBUG"):
            AppConfig.from_env({"WREN_DEBUG": "maybe"})

    @pytest.mark.parametrize(("raw", "expected"), [("1", True), ("off", False), ("TRUE", True)])
    def test_bool_spellings(self, raw: str, expected: bool) -> None:
        assert AppConfig.from_env({"WREN_DEBUG": raw}).debug is expected


class TestDotenv:
    def test_file_fills_unset_values(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("PORT=4000\nWREN_API_URL=https://api.test/from-file\n")
        config = AppConfig.from_env({}, env_file=env_file)
        assert config.port == 4000
        assert config.api_url == "https://api.test/from-file"

    def test_environment_wins_over_file(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("PORT=4000\n")
        assert AppConfig.from_env({"PORT": "5000"}, env_file=env_file).port == 5000

    def test_missing_file_is_ignored(self, tmp_path: Path) -> None:
        config = AppConfig.from_env({}, env_file=tmp_path / "absent.env")
        assert config == AppConfig()

    def test_file_disabled(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("PORT=4000\n")
        assert AppConfig.from_env({}, env_file=None).port == 8080

    def test_bad_value_in_file(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("WREN_FETCH_TIMEOUT=later\n")
        with pytest.raises(ConfigurationError, match="WREN_FETCH_TIMEOUT"):
            AppConfig.from_env({}, env_file=env_file)
