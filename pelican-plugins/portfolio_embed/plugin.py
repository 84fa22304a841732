"""Pelican side of the plugin: expand embed markers in articles and pages.

Usage in Markdown::

    [[embed:https://youtu.be/abc123|Showreel 2024]]
    [[embed:https://www.dailymotion.com/video/k2x9|Live session]]
    [[audio:https://soundcloud.com/artist/track|Mixdown|featured]]

Markdown escapes ``&`` in query strings, so marker text is unescaped before it
is classified. With ``PORTFOLIO_EMBED_SCRIPT`` set, embeds are rendered in their
pre-activation state and the theme's page script activates them in the browser;
without one they are rendered live.
"""
from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from html import unescape
from typing import Callable, List, Optional

from pelican import signals
from pelican.contents import Article, Page

from .embed import EmbedInstance
from .providers import AUDIO, VIDEO, MediaReference
from .render import render_audio, render_video
from .settings import EmbedSettings
from .thumbnails import ThumbnailResolver

logger = logging.getLogger(__name__)

EMBED_PATTERN = re.compile(
    r"(?:(?P<prefix><p[^>]*>)\s*)?\[\[(?P<kind>embed|audio):(?P<spec>.*?)]]\s*(?(prefix)</p>)",
    re.IGNORECASE | re.DOTALL,
)


@dataclass
class EmbedMarker:
    url: str
    kind: str
    title: str
    featured: bool = False


class _Deferred:
    def close(self) -> None:
        pass


class DeferredObserver:
    """Build-time observer: proximity is only known in the browser, so it never fires."""

    def __init__(self):
        self.margins: List[str] = []

    def observe(self, margin: str, callback: Callable[[bool], None]) -> _Deferred:
        self.margins.append(margin)
        return _Deferred()


def parse_marker(kind: str, spec: str) -> EmbedMarker:
    fields = [field.strip() for field in unescape(spec).split('|')]
    url = fields[0]
    media_kind = AUDIO if kind.lower() == 'audio' else VIDEO
    title = fields[1] if len(fields) > 1 and fields[1] else ('Audio' if media_kind == AUDIO else 'Video')
    featured = any(field.lower() == 'featured' for field in fields[2:])
    return EmbedMarker(url, media_kind, title, featured)


async def render_markers(markers: List[EmbedMarker], settings: EmbedSettings,
                         resolver: Optional[ThumbnailResolver] = None) -> List[str]:
    capabilities = settings.capabilities()
    instances = [
        EmbedInstance(MediaReference(marker.url, marker.kind), capabilities, DeferredObserver(), resolver)
        for marker in markers
    ]
    tasks = [task for task in (instance.mount() for instance in instances) if task is not None]
    if tasks:
        # a lookup still running at the deadline is dropped by dispose() below
        _, pending = await asyncio.wait(tasks, timeout=settings.thumbnail_deadline)
        if pending:
            logger.warning('portfolio_embed: %d thumbnail lookup(s) missed the %ss deadline',
                           len(pending), settings.thumbnail_deadline)

    rendered = []
    for marker, instance in zip(markers, instances):
        state = instance.snapshot()
        if state.embeddable_target is None:
            logger.warning('portfolio_embed: no embeddable source for %r, skipping', marker.url)
        if marker.kind == AUDIO:
            rendered.append(render_audio(state, marker.title, settings.audio_class, featured=marker.featured))
        else:
            rendered.append(render_video(state, marker.title, settings.embed_class))
        instance.dispose()
    return rendered


def _replace_embeds_in_text(text: str, settings, resolver: Optional[ThumbnailResolver] = None) -> str:
    matches = list(EMBED_PATTERN.finditer(text))
    if not matches:
        return text

    config = EmbedSettings.from_settings(settings)
    markers = [parse_marker(match.group('kind'), match.group('spec')) for match in matches]

    owns_resolver = resolver is None and config.resolve_thumbnails
    if owns_resolver:
        resolver = ThumbnailResolver(timeout=config.request_timeout)
    try:
        rendered = asyncio.run(render_markers(markers, config, resolver))
    finally:
        if owns_resolver:
            resolver.close()

    replacements = iter(rendered)
    return EMBED_PATTERN.sub(lambda match: next(replacements), text)


def replace_embeds(instance):
    if not isinstance(instance, (Article, Page)):
        return
    source = getattr(instance, '_content', None) or getattr(instance, 'content', None)
    if not source:
        return

    instance._content = _replace_embeds_in_text(source, instance.settings)  # noqa: SLF001


def replace_embeds_late(generators):
    for generator in generators:
        for attr in ('articles', 'pages'):
            for instance in getattr(generator, attr, []):
                if not isinstance(instance, (Article, Page)):
                    continue
                content = getattr(instance, '_content', None)
                if content:
                    instance._content = _replace_embeds_in_text(content, instance.settings)  # noqa: SLF001
                summary = getattr(instance, '_summary', None)
                if summary:
                    instance._summary = _replace_embeds_in_text(summary, instance.settings)  # noqa: SLF001


def register_markers():
    signals.content_object_init.connect(replace_embeds)
    signals.all_generators_finalized.connect(replace_embeds_late)
