from __future__ import annotations

from core.config import Redirect, RedirectOptions
from core.models import (
    Author,
    Body,
    ChannelInfo,
    InboundEmbed,
    InboundMessage,
    PlainTextHeader,
    RichEmbedHeader,
)
from core.transform import build_body, build_header, drop_reason, explain_path, text_length


def _message(text: str = "hello", embeds=()) -> InboundMessage:
    return InboundMessage(
        author=Author(id="1", username="alice", display_name="Alice"),
        channel=ChannelInfo(id="A", name="general", guild_name="Guild", parent_name="Text"),
        content=text,
        embeds=tuple(embeds),
    )


def _redirect(**options) -> Redirect:
    return Redirect(sources=frozenset({"A"}), destinations=("B",), options=RedirectOptions(**options))


def test_explain_path_variants() -> None:
    assert explain_path(ChannelInfo(id="1", name="chat", guild_name="Guild", parent_name="Cat")) == "Guild/Cat/chat"
    assert explain_path(ChannelInfo(id="1", name="chat", guild_name="Guild")) == "Guild/chat"
    assert explain_path(ChannelInfo(id="1", is_private=True)) == "Direct Messages"
    assert explain_path(ChannelInfo(id="1", name="group")) == ""


def test_header_absent_without_title_or_source() -> None:
    assert build_header(_message(), _redirect()) is None
    assert build_header(_message(), _redirect(rich_embed=True)) is None


def test_plain_text_header_with_title_and_source() -> None:
    header = build_header(_message(), _redirect(title="News", include_source=True))

    assert header == PlainTextHeader(
        "**News**\n*Author: **Alice** in **Guild/Text/general***\n"
    )
    assert header.content == header.text
    assert header.embed is None


def test_rich_embed_header_uses_default_color() -> None:
    header = build_header(_message(), _redirect(rich_embed=True, include_source=True))

    assert isinstance(header, RichEmbedHeader)
    assert header.content is None
    assert header.embed == {
        "type": "rich",
        "color": 30975,
        "fields": [{"name": "Author", "value": "**Alice** in **Guild/Text/general**", "inline": False}],
    }


def test_rich_embed_header_title_only_with_custom_color() -> None:
    header = build_header(_message(), _redirect(rich_embed=True, title="News", rich_embed_color=0xFF0000))

    assert header.embed == {"type": "rich", "color": 0xFF0000, "title": "News"}


def test_remove_everyone_strips_only_first_occurrence() -> None:
    body = build_body(_message("@everyone @everyone"), _redirect(remove_everyone=True))
    assert body.contents == " @everyone"


def test_remove_here_strips_only_first_occurrence() -> None:
    body = build_body(_message("@here look @here"), _redirect(remove_here=True))
    assert body.contents == " look @here"


def test_mentions_kept_without_options() -> None:
    body = build_body(_message("@everyone @here"), _redirect())
    assert body == Body(contents="@everyone @here", embed=None)


def test_copy_rich_embed_takes_first_rich_embed() -> None:
    embeds = [
        InboundEmbed(type="image", data={"type": "image", "url": "https://x/a.png"}),
        InboundEmbed(type="rich", data={"type": "rich", "title": "first"}),
        InboundEmbed(type="rich", data={"type": "rich", "title": "second"}),
    ]
    source = _message(embeds=embeds)

    body = build_body(source, _redirect(copy_rich_embed=True))

    assert body.embed == {"type": "rich", "title": "first"}
    body.embed["title"] = "changed"
    assert source.embeds[1].data["title"] == "first"


def test_copy_rich_embed_ignored_when_disabled() -> None:
    embeds = [InboundEmbed(type="rich", data={"type": "rich", "title": "first"})]
    assert build_body(_message(embeds=embeds), _redirect()).embed is None


def test_min_length_drops_short_text() -> None:
    redirect = _redirect(min_length=10)

    assert drop_reason(build_body(_message("hi"), redirect), redirect) == "their message is too short"
    assert drop_reason(build_body(_message("0123456789"), redirect), redirect) is None


def test_min_length_skipped_when_embed_present() -> None:
    redirect = _redirect(min_length=10, copy_rich_embed=True)
    embeds = [InboundEmbed(type="rich", data={"type": "rich", "title": "t"})]

    assert drop_reason(build_body(_message("hi", embeds), redirect), redirect) is None


def test_empty_body_is_dropped() -> None:
    redirect = _redirect(remove_everyone=True)
    body = build_body(_message("@everyone"), redirect)

    assert body.contents == ""
    assert drop_reason(body, redirect) == "their message would be empty due to redirect options"


def test_min_length_counts_utf16_units() -> None:
    redirect = _redirect(min_length=3)

    assert text_length("\U0001F600a") == 3
    assert drop_reason(build_body(_message("\U0001F600a"), redirect), redirect) is None
    assert drop_reason(build_body(_message("ab"), redirect), redirect) == "their message is too short"
