"""Configuration loading for echobot.

All user-editable settings (token, redirects, logging, reconnect) live in a
single JSON document: a config.json file in the working directory or, for
hosts without a writable filesystem, the ECHOBOT_CONFIG_JSON environment
variable.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from dotenv import load_dotenv

from core.config import ReconnectConfig, Redirect
from core.errors import ConfigurationError
from core.redirects import build_redirects

CONFIG_FILENAME = "config.json"
CONFIG_ENV = "ECHOBOT_CONFIG_JSON"
TOKEN_ENV = "DISCORD_TOKEN"
PORT_ENV = "PORT"


@dataclass(frozen=True)
class Settings:
    """Validated, immutable settings for one process lifetime."""

    token: str
    redirects: Tuple[Redirect, ...]
    logging: dict = field(default_factory=dict)
    reconnect: ReconnectConfig = field(default_factory=ReconnectConfig)
    health_port: Optional[int] = None


def _load_json_config(path: str) -> dict:
    """Load the raw config from the file, falling back to the environment."""

    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as handle:
            raw = handle.read()
        origin = path
    elif os.getenv(CONFIG_ENV):
        raw = os.environ[CONFIG_ENV]
        origin = CONFIG_ENV
    else:
        raise ConfigurationError(
            "No configuration could be found. Either create a config.json file "
            f"or put the config in the {CONFIG_ENV} environment variable."
        )

    try:
        config = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"The configuration in {origin} is not valid JSON: {exc}") from exc
    if not isinstance(config, dict):
        raise ConfigurationError(f"The configuration in {origin} must be a JSON object.")
    return config


def _reconnect_config(raw: Any) -> ReconnectConfig:
    if not raw:
        return ReconnectConfig()
    if not isinstance(raw, dict):
        raise ConfigurationError("The reconnect settings must be a JSON object.")
    defaults = ReconnectConfig()
    try:
        return ReconnectConfig(
            initial_delay=float(raw.get("initial_delay", defaults.initial_delay)),
            max_delay=float(raw.get("max_delay", defaults.max_delay)),
            factor=float(raw.get("factor", defaults.factor)),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid reconnect settings: {exc}") from exc


def _health_port() -> Optional[int]:
    # The health endpoint is optional; a missing or garbled PORT disables it.
    try:
        return int(os.getenv(PORT_ENV, ""))
    except ValueError:
        return None


def load_settings(path: Optional[str] = None) -> Settings:
    """Read, validate, and freeze the configuration.

    Raises ConfigurationError on anything that would make the relay unusable;
    callers treat that as fatal at startup.
    """

    load_dotenv()
    config = _load_json_config(path or os.path.join(os.getcwd(), CONFIG_FILENAME))

    # Secrets may stay out of the JSON file and come from .env instead.
    token = config.get("token") or os.getenv(TOKEN_ENV)
    if not token:
        raise ConfigurationError("The Discord Client token is missing from the configuration file.")

    redirects = build_redirects(config.get("redirects"))

    logging_config = config.get("logging") or {}
    if not isinstance(logging_config, dict):
        raise ConfigurationError("The logging settings must be a JSON object.")

    return Settings(
        token=str(token),
        redirects=tuple(redirects),
        logging=logging_config,
        reconnect=_reconnect_config(config.get("reconnect")),
        health_port=_health_port(),
    )
