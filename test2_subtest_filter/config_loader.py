"""Loader for the workspace configuration file."""

import asyncio
import logging
from pathlib import Path

import yaml

from test2_subtest_filter.models.config import RunnerConfig

log = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".test2-subtest-filter.yaml"


async def load_config(workspace_root: Path) -> RunnerConfig:
    """Load runner configuration from the workspace root.

    A missing file, an empty file, or missing keys fall back to defaults.

    Raises:
        yaml.YAMLError: If the file is not valid YAML
        pydantic.ValidationError: If a value has the wrong type

    """
    config_file = workspace_root / CONFIG_FILE_NAME
    if not config_file.is_file():
        log.debug("No config file at %s, using defaults", config_file)
        return RunnerConfig()

    content = await asyncio.to_thread(config_file.read_text, encoding="utf-8")
    data = yaml.safe_load(content) or {}
    log.info("Loaded config from %s", config_file)
    return RunnerConfig.model_validate(data)
