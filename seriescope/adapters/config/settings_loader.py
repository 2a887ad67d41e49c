import os

import yaml

from seriescope.core.domain.settings import EngineSettings

ENV_PREFIX = "SERIESCOPE_"


def load_settings(path: str | None = None) -> EngineSettings:
    """
    Load engine settings from a YAML file.
    Falls back to defaults if the file doesn't exist; environment variables override both.

    Args:
        path: Path to config.yaml. Defaults to SERIESCOPE_CONFIG_FILE env var or "config.yaml".

    Raises:
        RuntimeError: if the file exists but cannot be parsed
    """
    if path is None:
        path = os.getenv(f"{ENV_PREFIX}CONFIG_FILE", "config.yaml")

    config_data = {}

    if os.path.exists(path):
        try:
            with open(path, "r") as f:
                config_data = yaml.safe_load(f) or {}
        except Exception as e:
            raise RuntimeError(f"Failed to load configuration from {path}: {e}")

    if not isinstance(config_data, dict):
        raise RuntimeError(f"Failed to load configuration from {path}: expected a mapping, got {type(config_data).__name__}")

    # Settings may sit at the top level or under an "engine" key
    if isinstance(config_data.get("engine"), dict):
        config_data = config_data["engine"]

    # Env vars > File > Defaults; Pydantic coerces the strings
    for field_name in EngineSettings.model_fields:
        env_value = os.getenv(f"{ENV_PREFIX}{field_name.upper()}")
        if env_value is not None:
            config_data[field_name] = None if env_value.lower() in ("", "none", "null") else env_value

    return EngineSettings(**config_data)
