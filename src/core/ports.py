"""Ports (interfaces) used by the core pipeline.

Ports define the minimal contracts for the chat platform so that the core can
be reused with different clients and exercised with fakes in tests.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

from core.models import Attachment, AttachmentFile, ChannelInfo


class DestinationChannel(Protocol):
    """A resolved channel the relay may post into."""

    @property
    def is_text(self) -> bool:
        ...

    @property
    def location(self) -> ChannelInfo:
        ...

    async def send(
        self,
        content: Optional[str],
        *,
        embed: Optional[Dict[str, Any]],
        attachments: Sequence[AttachmentFile],
        nonce: str,
    ) -> None:
        """Send one message; transport failures raise DispatchError."""
        ...


class PlatformPort(Protocol):
    """Channel lookup and attachment retrieval required by the dispatcher."""

    def get_channel(self, channel_id: str) -> Optional[DestinationChannel]:
        ...

    async def fetch_attachments(self, attachments: Sequence[Attachment]) -> List[AttachmentFile]:
        ...
