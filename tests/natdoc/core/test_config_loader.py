"""Tests for the natdoc configuration loader."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from natdoc.core.config import (
    DocConfig,
    LoggingConfig,
    clear_config_cache,
    get_default_config,
    load_config,
)
from natdoc.core.config.loader import ConfigLoader, _parse_bool_env
from natdoc.core.exceptions import ConfigurationError, ValidationError

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove natdoc environment overrides for every test."""
    for name in (
        "NATDOC_CONFIG_PATH",
        "NATDOC_LOG_LEVEL",
        "NATDOC_LOG_FORMAT",
        "NATDOC_LOG_FILE",
        "NATDOC_LOG_COLOR",
        "NATDOC_LOG_RICH",
    ):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    """Tests for load_config."""

    def test_flat_natdoc_toml(self, tmp_path: Path) -> None:
        """Test loading top-level keys from natdoc.toml."""
        config_file = tmp_path / "natdoc.toml"
        config_file.write_text(
            'title = "Counter Docs"\n'
            'src = "contracts"\n'
            'exclude = ["contracts/mocks/*"]\n'
            'min_visibility = "public"\n'
            "strict = true\n"
            "workers = 2\n"
        )

        config = load_config(config_file)

        assert config.title == "Counter Docs"
        assert config.src == "contracts"
        assert config.exclude == ("contracts/mocks/*",)
        assert config.min_visibility == "public"
        assert config.strict is True
        assert config.workers == 2

    def test_pyproject_tool_section(self, tmp_path: Path) -> None:
        """Test loading [tool.natdoc] from pyproject.toml, found by search."""
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "demo"\n\n'
            "[tool.natdoc]\n"
            'preprocessors = ["inheritdoc", "ordering"]\n'
            'custom_tags = ["security-contact"]\n'
            "\n[tool.natdoc.logging]\n"
            'level = "DEBUG"\n'
        )

        config = load_config(search_dir=tmp_path)

        assert config.preprocessors == ("inheritdoc", "ordering")
        assert config.custom_tags == ("security-contact",)
        assert config.logging.level == "DEBUG"

    def test_pyproject_without_section_uses_defaults(self, tmp_path: Path) -> None:
        """Test that a pyproject.toml without [tool.natdoc] yields defaults."""
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n')

        assert load_config(search_dir=tmp_path) == get_default_config()

    def test_natdoc_toml_preferred_over_pyproject(self, tmp_path: Path) -> None:
        """Test the search order."""
        (tmp_path / "natdoc.toml").write_text('title = "from natdoc.toml"\n')
        (tmp_path / "pyproject.toml").write_text('[tool.natdoc]\ntitle = "from pyproject"\n')

        assert load_config(search_dir=tmp_path).title == "from natdoc.toml"

    def test_no_file_found_uses_defaults(self, tmp_path: Path) -> None:
        """Test that searching an empty directory returns defaults."""
        assert load_config(search_dir=tmp_path) == DocConfig()

    def test_explicit_missing_file_raises(self, tmp_path: Path) -> None:
        """Test that an explicit path must exist."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")

    def test_config_path_from_environment(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test NATDOC_CONFIG_PATH."""
        config_file = tmp_path / "custom.toml"
        config_file.write_text('title = "From env"\n')
        monkeypatch.setenv("NATDOC_CONFIG_PATH", str(config_file))

        assert load_config(search_dir=tmp_path / "elsewhere").title == "From env"

    def test_environment_variable_substitution(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test ${VAR} placeholders, known and unknown."""
        monkeypatch.setenv("NATDOC_TEST_COMMIT", "abc123")
        monkeypatch.delenv("NATDOC_TEST_UNSET", raising=False)
        config_file = tmp_path / "natdoc.toml"
        config_file.write_text(
            'repository = "https://github.com/org/${NATDOC_TEST_UNSET}"\n'
            'commit = "${NATDOC_TEST_COMMIT}"\n'
        )

        config = load_config(config_file)

        assert config.commit == "abc123"
        assert config.repository == "https://github.com/org/${NATDOC_TEST_UNSET}"

    def test_wrong_type_raises(self, tmp_path: Path) -> None:
        """Test that a key of the wrong type is a configuration error."""
        config_file = tmp_path / "natdoc.toml"
        config_file.write_text("strict = 1\n")

        with pytest.raises(ConfigurationError, match="strict"):
            load_config(config_file)

    def test_bool_is_not_an_int(self, tmp_path: Path) -> None:
        """Test that true is rejected where a number is expected."""
        config_file = tmp_path / "natdoc.toml"
        config_file.write_text("max_inheritdoc_depth = true\n")

        with pytest.raises(ConfigurationError, match="max_inheritdoc_depth"):
            load_config(config_file)

    def test_invalid_toml_raises(self, tmp_path: Path) -> None:
        """Test that a syntax error is a configuration error."""
        config_file = tmp_path / "natdoc.toml"
        config_file.write_text("title = \n")

        with pytest.raises(ConfigurationError, match="invalid TOML"):
            load_config(config_file)

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        """Test that out-of-range values fail validation."""
        config_file = tmp_path / "natdoc.toml"
        config_file.write_text('param_policy = "merge"\n')

        with pytest.raises(ValidationError, match="param_policy"):
            load_config(config_file)

    def test_results_are_cached(self, tmp_path: Path) -> None:
        """Test that repeated loads reuse the parsed configuration."""
        config_file = tmp_path / "natdoc.toml"
        config_file.write_text('title = "Cached"\n')

        first = load_config(config_file)
        config_file.write_text('title = "Changed"\n')

        assert load_config(config_file) is first
        clear_config_cache()
        assert load_config(config_file).title == "Changed"


class TestLoggingConfig:
    """Tests for logging configuration parsing."""

    def test_environment_overrides_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that NATDOC_LOG_* variables win over the file."""
        config_file = tmp_path / "natdoc.toml"
        config_file.write_text('[logging]\nlevel = "INFO"\nformat = "console"\n')
        monkeypatch.setenv("NATDOC_LOG_LEVEL", "debug")
        monkeypatch.setenv("NATDOC_LOG_RICH", "yes")

        config = load_config(config_file)

        assert config.logging.level == "DEBUG"
        assert config.logging.format == "console"
        assert config.logging.use_rich is True

    def test_defaults(self) -> None:
        """Test the default logging configuration."""
        assert ConfigLoader()._parse_logging_config({}) == LoggingConfig()

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("true", True), ("On", True), ("0", False), (" disabled ", False)],
    )
    def test_parse_bool_env(self, value: str, expected: bool) -> None:
        """Test boolean environment parsing."""
        assert _parse_bool_env(value) is expected

    def test_parse_bool_env_rejects_garbage(self) -> None:
        """Test that unknown boolean strings raise."""
        with pytest.raises(ValueError, match="Invalid boolean"):
            _parse_bool_env("maybe")


class TestDocConfigValidation:
    """Tests for DocConfig validation."""

    @pytest.mark.parametrize(
        ("kwargs", "field"),
        [
            ({"min_visibility": "everyone"}, "min_visibility"),
            ({"max_inheritdoc_depth": 0}, "max_inheritdoc_depth"),
            ({"workers": 0}, "workers"),
            ({"extensions": ("sol",)}, "extensions"),
        ],
    )
    def test_invalid_values(self, kwargs: dict[str, object], field: str) -> None:
        """Test that each constraint names its field."""
        with pytest.raises(ValidationError) as exc_info:
            DocConfig(**kwargs)

        assert exc_info.value.field == field
