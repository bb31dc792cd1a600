"""Tests for config loader."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from test2_subtest_filter.config_loader import CONFIG_FILE_NAME, load_config
from test2_subtest_filter.models.config import RunnerConfig


class TestLoadConfig:
    """Tests for load_config function."""

    async def test_returns_defaults_without_file(self, tmp_path: Path) -> None:
        """Falls back to defaults when no config file exists."""
        config = await load_config(tmp_path)

        assert config == RunnerConfig()
        assert config.base_command == "prove -lv"
        assert config.command == "prove -lv"
        assert config.file_pattern == "**/*.t"
        assert config.force_color is True

    async def test_returns_defaults_for_empty_file(self, tmp_path: Path) -> None:
        """An empty file is the same as no file."""
        (tmp_path / CONFIG_FILE_NAME).write_text("")

        assert await load_config(tmp_path) == RunnerConfig()

    async def test_loads_values(self, tmp_path: Path) -> None:
        """Loads values and keeps defaults for missing keys."""
        (tmp_path / CONFIG_FILE_NAME).write_text(
            """
base_command: "docker compose exec app carton exec -- prove"
extra_args:
  - "-lv"
  - "--timer"
translate_newlines: true
"""
        )

        config = await load_config(tmp_path)

        assert config.base_command == "docker compose exec app carton exec -- prove"
        assert config.command == (
            "docker compose exec app carton exec -- prove -lv --timer"
        )
        assert config.translate_newlines is True
        assert config.file_pattern == "**/*.t"

    async def test_rejects_invalid_values(self, tmp_path: Path) -> None:
        """Raises ValidationError for wrongly typed values."""
        (tmp_path / CONFIG_FILE_NAME).write_text("force_color: [1, 2]\n")

        with pytest.raises(ValidationError):
            await load_config(tmp_path)

    async def test_rejects_unknown_keys(self, tmp_path: Path) -> None:
        """Raises ValidationError for misspelled keys."""
        (tmp_path / CONFIG_FILE_NAME).write_text("base_comand: prove\n")

        with pytest.raises(ValidationError):
            await load_config(tmp_path)
