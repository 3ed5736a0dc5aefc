"""Delivery of transformed messages to redirect destinations.

Every destination is handled independently: a missing channel, a channel of
the wrong type, or a failed send is reported for that destination only and
never stops delivery to the others.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Callable, List, Optional, Sequence

from core.config import Redirect
from core.errors import DispatchError, DispatchFailure
from core.models import AttachmentFile, Body, DispatchResult, Header, InboundMessage
from core.nonce import generate_nonce
from core.ports import DestinationChannel, PlatformPort
from core.transform import explain_path

LOGGER = logging.getLogger(__name__)


class Dispatcher:
    """Sends header and body of one message to each destination of a redirect."""

    def __init__(
        self,
        platform: PlatformPort,
        nonce_factory: Callable[[], str] = generate_nonce,
    ) -> None:
        self._platform = platform
        self._nonce_factory = nonce_factory

    async def dispatch(
        self,
        message: InboundMessage,
        redirect: Redirect,
        header: Optional[Header],
        body: Body,
    ) -> List[DispatchResult]:
        """Deliver to all destinations concurrently; one result per destination."""

        source = message.channel.id
        files: Sequence[AttachmentFile] = ()
        if redirect.options.copy_attachments and message.attachments:
            # Downloaded once here so every destination re-sends the same bytes.
            try:
                files = await self._platform.fetch_attachments(message.attachments)
            except Exception as exc:
                LOGGER.exception("Could not download attachments from channel ID %s", source)
                results = [
                    DispatchResult(
                        destination=destination,
                        error=DispatchError(
                            DispatchFailure.TRANSPORT,
                            destination,
                            source,
                            detail=f"attachment download failed: {_describe(exc)}",
                        ),
                    )
                    for destination in redirect.destinations
                ]
                self._log_failures(results)
                return results

        results = await asyncio.gather(
            *(
                self._dispatch_one(message, destination, header, body, files)
                for destination in redirect.destinations
            )
        )
        self._log_failures(results)
        return list(results)

    @staticmethod
    def _log_failures(results: Sequence[DispatchResult]) -> None:
        for result in results:
            if result.error is not None:
                LOGGER.error("%s", result.error)

    def _resolve(self, source: str, destination: str) -> DestinationChannel:
        channel = self._platform.get_channel(destination)
        if channel is None:
            raise DispatchError(DispatchFailure.NOT_FOUND, destination, source)
        if not channel.is_text:
            raise DispatchError(DispatchFailure.WRONG_TYPE, destination, source)
        return channel

    async def _dispatch_one(
        self,
        message: InboundMessage,
        destination: str,
        header: Optional[Header],
        body: Body,
        files: Sequence[AttachmentFile],
    ) -> DispatchResult:
        source = message.channel.id
        nonces: List[str] = []
        try:
            channel = self._resolve(source, destination)
            LOGGER.info(
                "Redirecting message by %s from %s to %s",
                message.author.username,
                explain_path(message.channel),
                explain_path(channel.location),
            )

            # Header and body are separate messages; the header always goes first.
            if header is not None:
                LOGGER.debug("Sending header: %s", header)
                nonce = self._nonce_factory()
                await channel.send(header.content, embed=header.embed, attachments=(), nonce=nonce)
                nonces.append(nonce)

            LOGGER.debug("Sending body: %s", json.dumps({"contents": body.contents, "embed": body.embed}, default=str))
            nonce = self._nonce_factory()
            await channel.send(body.contents, embed=body.embed, attachments=files, nonce=nonce)
            nonces.append(nonce)
            LOGGER.debug("Sent body.")
        except DispatchError as error:
            if not error.source:
                error = error.for_source(source)
            return DispatchResult(destination=destination, error=error, nonces=nonces)
        except Exception as exc:
            # Anything else is still scoped to this destination.
            LOGGER.exception("Unexpected error while redirecting to channel ID %s", destination)
            error = DispatchError(DispatchFailure.TRANSPORT, destination, source, detail=_describe(exc))
            return DispatchResult(destination=destination, error=error, nonces=nonces)

        return DispatchResult(destination=destination, nonces=nonces)


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__
