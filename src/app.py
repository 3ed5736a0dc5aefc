"""Application entry point for the echobot relay."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

from adapters.health_server import HealthServer
from client import build_client
from core.errors import ConfigurationError
from lifecycle import ConnectionSupervisor
from settings import Settings, load_settings

NAME = "ECHOBOT"
FONT = "tarty-1"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict, token: Optional[str]) -> list[str]:
    values = [token] if token else []
    redact_cfg = config.get("redact", {}) if config else {}
    if redact_cfg.get("enabled", False):
        for name in redact_cfg.get("patterns", []):
            value = os.getenv(name)
            if value:
                values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(config: dict, token: Optional[str] = None) -> None:
    if not config.get("enabled", True):
        return

    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    secrets = _collect_redaction_values(config, token)
    formatter = _RedactingFormatter(secrets, fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/echobot.log")
        if not os.path.isabs(path):
            path = os.path.join(os.getcwd(), path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    # discord.py is chatty at INFO; keep it one notch quieter than the relay.
    logging.getLogger("discord").setLevel(max(level, logging.WARNING))
    logging.basicConfig(level=level, handlers=handlers, force=True)


def _load_or_exit() -> Settings:
    try:
        return load_settings()
    except ConfigurationError as exc:
        _configure_logging({})
        logging.getLogger(__name__).error("%s", exc)
        raise SystemExit(1) from exc


async def _serve(settings: Settings) -> None:
    health_server = None
    if settings.health_port is not None:
        health_server = HealthServer(settings.health_port)
        await health_server.start()

    supervisor = ConnectionSupervisor(
        settings.token,
        lambda on_ready: build_client(settings.redirects, on_ready),
        settings.reconnect,
    )
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, lambda: asyncio.create_task(supervisor.stop()))
        except (NotImplementedError, RuntimeError):
            break

    try:
        await supervisor.run()
    finally:
        if health_server is not None:
            await health_server.stop()


def _run() -> None:
    _print_banner()
    settings = _load_or_exit()
    _configure_logging(settings.logging, settings.token)
    logger = logging.getLogger(__name__)

    logger.info("Configuration loaded successfully.")
    logger.info("%s redirects are loaded", len(settings.redirects))

    try:
        asyncio.run(_serve(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")


def _check() -> None:
    settings = _load_or_exit()
    for index, redirect in enumerate(settings.redirects, start=1):
        sources = ", ".join(sorted(redirect.sources))
        destinations = ", ".join(redirect.destinations)
        print(f"{index}. {sources} -> {destinations}")
    print(f"Configuration OK: {len(settings.redirects)} redirect(s).")


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="echobot")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start relaying messages")
    subparsers.add_parser("check", help="Validate the configuration and list redirects")

    args = parser.parse_args(argv)
    if args.command == "check":
        _check()
        return
    _run()


if __name__ == "__main__":
    main()
