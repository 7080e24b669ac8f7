"""Configuration loading.

The policy file and the environment settings are each read exactly once
per run; every failure is reported as ConfigError.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from release_changelog.config.models import ChangelogPolicy, Settings
from release_changelog.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_POLICY_PATH = Path("config.json")
DEFAULT_ENV_FILE = Path(".env")


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item["loc"]) or "<root>"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


def load_policy(path: Path | None = None) -> ChangelogPolicy:
    """Load the changelog policy from a JSON file.

    Args:
        path: Path to the policy file. Defaults to ./config.json.

    Returns:
        Validated ChangelogPolicy

    Raises:
        ConfigError: If the file is missing, not valid JSON, or does
            not describe a valid policy
    """
    policy_path = path or DEFAULT_POLICY_PATH

    try:
        content = policy_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"Error reading {policy_path}: file not found") from e
    except OSError as e:
        raise ConfigError(f"Error reading {policy_path}: {e}") from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Error reading {policy_path}: invalid JSON ({e})") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Error reading {policy_path}: expected a JSON object")

    try:
        policy = ChangelogPolicy.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid policy in {policy_path}: {_format_validation_error(e)}") from e

    logger.debug(
        "Loaded policy from %s (%d authors, %d ignored types, %d section titles)",
        policy_path,
        len(policy.authors),
        len(policy.ignore_types),
        len(policy.types),
    )
    return policy


def load_settings(env_file: Path | None = DEFAULT_ENV_FILE) -> Settings:
    """Load runtime settings from the environment and an optional .env file.

    Variables already present in the environment take precedence over
    values from the .env file.

    Args:
        env_file: Path to a dotenv file, or None to only use the environment

    Returns:
        Settings with the required GitHub variables present

    Raises:
        ConfigError: If required variables are missing or malformed
    """
    try:
        settings = Settings(_env_file=env_file)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {_format_validation_error(e)}") from e

    missing = settings.missing_github_settings()
    if missing:
        raise ConfigError(
            f"Missing required environment variables: {', '.join(missing)}. "
            "Please check your .env file."
        )

    return settings
