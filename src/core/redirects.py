"""Redirect compilation, matching, and author filtering (core domain)."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional

from core.config import Redirect, RedirectOptions
from core.errors import ConfigurationError
from core.models import InboundMessage
from core.transform import explain_path

LOGGER = logging.getLogger(__name__)

# JSON option keys mapped to RedirectOptions fields.
_BOOL_OPTIONS = {
    "includeSource": "include_source",
    "richEmbed": "rich_embed",
    "copyRichEmbed": "copy_rich_embed",
    "removeEveryone": "remove_everyone",
    "removeHere": "remove_here",
    "copyAttachments": "copy_attachments",
}
_INT_OPTIONS = {
    "minLength": "min_length",
    "richEmbedColor": "rich_embed_color",
}


def _channel_ids(redirect: Mapping[str, Any], key: str, label: str) -> List[str]:
    raw = redirect.get(key)
    if not raw:
        raise ConfigurationError(f"A redirect has no {label}.")
    if not isinstance(raw, list):
        raise ConfigurationError(f"A redirect's {label} were not formatted as an array.")
    # Config files may carry snowflakes as numbers; the core compares strings.
    return [str(item) for item in raw]


def _optional_int(options: Mapping[str, Any], key: str) -> Optional[int]:
    value = options.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(f"The redirect option {key} must be an integer.")
    return value


def build_options(raw_options: Optional[Mapping[str, Any]]) -> RedirectOptions:
    """Normalize a redirect's JSON options into RedirectOptions."""

    if raw_options is None:
        return RedirectOptions()
    if not isinstance(raw_options, Mapping):
        raise ConfigurationError("A redirect's options were not formatted as an object.")

    allow_list = raw_options.get("allowList") or []
    if not isinstance(allow_list, list):
        raise ConfigurationError("A redirect's allowList was not formatted as an array.")

    title = raw_options.get("title")
    values: dict = {
        "allow_list": frozenset(str(user_id) for user_id in allow_list),
        "title": str(title) if title else None,
    }
    for key, name in _BOOL_OPTIONS.items():
        values[name] = bool(raw_options.get(key, False))
    for key, name in _INT_OPTIONS.items():
        values[name] = _optional_int(raw_options, key)
    return RedirectOptions(**values)


def build_redirects(redirects_config: Any) -> List[Redirect]:
    """Validate the raw ``redirects`` config and build immutable Redirects.

    Any problem raises ConfigurationError; the relay must not start with a
    partially usable configuration.
    """

    if not redirects_config:
        raise ConfigurationError("You have not defined any redirects. This bot is useless without them.")
    if not isinstance(redirects_config, list):
        raise ConfigurationError(
            "The redirects are not properly formatted (missing array). Please check your configuration."
        )

    compiled: List[Redirect] = []
    for raw in redirects_config:
        if not isinstance(raw, Mapping):
            raise ConfigurationError("A redirect was not formatted as an object.")
        sources = _channel_ids(raw, "sources", "sources")
        destinations = _channel_ids(raw, "destinations", "destinations")

        # A channel that feeds itself would relay its own relays forever.
        for source in sources:
            if source in destinations:
                raise ConfigurationError(
                    f"A redirect has a source that is the same as a destination: {source}. "
                    "This will result in an infinite loop."
                )

        compiled.append(
            Redirect(
                sources=frozenset(sources),
                destinations=tuple(dict.fromkeys(destinations)),
                options=build_options(raw.get("options")),
            )
        )
    return compiled


def matching_redirects(channel_id: str, redirects: Iterable[Redirect]) -> List[Redirect]:
    """Return every redirect listening on the channel, in configuration order."""

    return [redirect for redirect in redirects if channel_id in redirect.sources]


def passes_author_filter(message: InboundMessage, redirect: Redirect) -> bool:
    """Apply the redirect's allow list; an empty list lets everyone through."""

    allow_list = redirect.options.allow_list
    if not allow_list or message.author.id in allow_list:
        return True

    LOGGER.info(
        "Dropping message from %s in %s as their ID (%s) is not in the allowList.",
        message.author.username,
        explain_path(message.channel),
        message.author.id,
    )
    return False
