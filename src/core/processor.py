"""Core message processing pipeline.

This module is integration-agnostic. It only relies on the platform port for
delivery, so the relay rules can run against any chat client or a fake.

The pipeline enforces a strict order for each inbound message:
1) Select redirects listening on the message's channel
2) Apply the redirect's author allow list
3) Build header and body from the redirect options
4) Drop bodies that are too short or empty
5) Dispatch to every destination of the redirect
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Tuple

from core.config import Redirect
from core.dispatch import Dispatcher
from core.models import DispatchResult, InboundMessage
from core.redirects import matching_redirects, passes_author_filter
from core.transform import build_body, build_header, drop_reason, explain_path

LOGGER = logging.getLogger(__name__)


class MessageProcessor:
    """Orchestrates matching, filtering, transformation, and dispatch."""

    def __init__(self, redirects: Iterable[Redirect], dispatcher: Dispatcher) -> None:
        # Redirects are loaded once and never mutated, so concurrent handle()
        # calls can share them safely.
        self._redirects = tuple(redirects)
        self._dispatcher = dispatcher

    @property
    def redirects(self) -> Tuple[Redirect, ...]:
        return self._redirects

    async def handle(self, message: InboundMessage) -> List[Tuple[Redirect, List[DispatchResult]]]:
        """Process one inbound message through every matching redirect.

        Returns (redirect, results) pairs in configuration order; redirects whose
        filters dropped the message are absent.
        """

        outcome: List[Tuple[Redirect, List[DispatchResult]]] = []
        for redirect in matching_redirects(message.channel.id, self._redirects):
            if not passes_author_filter(message, redirect):
                continue

            header = build_header(message, redirect)
            body = build_body(message, redirect)

            reason = drop_reason(body, redirect)
            if reason:
                LOGGER.info(
                    "Dropping message from %s in %s as %s.",
                    message.author.username,
                    explain_path(message.channel),
                    reason,
                )
                continue

            results = await self._dispatcher.dispatch(message, redirect, header, body)
            outcome.append((redirect, results))
        return outcome
