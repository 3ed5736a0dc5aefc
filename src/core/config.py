"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

DEFAULT_RICH_EMBED_COLOR = 30975


@dataclass(frozen=True)
class RedirectOptions:
    """Per-redirect filtering and transformation switches."""

    allow_list: FrozenSet[str] = frozenset()
    min_length: Optional[int] = None
    title: Optional[str] = None
    include_source: bool = False
    rich_embed: bool = False
    rich_embed_color: Optional[int] = None
    copy_rich_embed: bool = False
    remove_everyone: bool = False
    remove_here: bool = False
    copy_attachments: bool = False


@dataclass(frozen=True)
class Redirect:
    """A validated redirect: where messages come from and where they go."""

    sources: FrozenSet[str]
    destinations: Tuple[str, ...]
    options: RedirectOptions = field(default_factory=RedirectOptions)


@dataclass(frozen=True)
class ReconnectConfig:
    """Backoff settings for re-opening the platform session."""

    initial_delay: float = 1.0
    max_delay: float = 60.0
    factor: float = 2.0
