"""Feed-safe embed figures.

Feed readers strip iframes and never run the activation script, so a dormant
embed shows up as an empty box. While Pelican's Writer adds an item to a feed,
each embed figure is swapped for its thumbnail wrapped in a link to the media
(or a bare link when there is no thumbnail). Article content itself is never
modified, so the rendered pages are unaffected.
"""
from __future__ import annotations

import re
from html import escape, unescape

from pelican.writers import Writer

from .settings import EmbedSettings

_ATTR = re.compile(r'\s(?P<name>data-[a-z-]+)="(?P<value>[^"]*)"')
_WATCH = re.compile(r'<a\s[^>]*href="(?P<href>[^"]+)"[^>]*>Watch on YouTube</a>')


def _figure_pattern(css_classes) -> re.Pattern:
    names = '|'.join(re.escape(name) for name in css_classes)
    return re.compile(
        rf'<figure\s(?P<attrs>[^>]*class="(?:{names})(?:\s[^"]*)?"[^>]*)>'
        r'(?P<body>.*?)</figure>',
        re.DOTALL | re.IGNORECASE,
    )


def make_feed_safe(content: str, settings=None) -> str:
    """Return *content* with embed figures replaced by linked thumbnails."""
    config = EmbedSettings.from_settings(settings)
    pattern = _figure_pattern((config.embed_class, config.audio_class))

    def _replace(m: re.Match) -> str:
        attrs = {a.group('name'): unescape(a.group('value')) for a in _ATTR.finditer(' ' + m.group('attrs'))}
        watch = _WATCH.search(m.group('body'))
        link = unescape(watch.group('href')) if watch else attrs.get('data-embed-src', '')
        thumbnail = attrs.get('data-thumbnail')
        if not link:
            return ''
        if thumbnail:
            return (
                f'<figure><a href="{escape(link)}"><img src="{escape(thumbnail)}" alt="Video" /></a></figure>'
            )
        return f'<p><a href="{escape(link)}">{escape(link)}</a></p>'

    return pattern.sub(_replace, content)


def _patch_writer() -> None:
    """Wrap Writer._add_item_to_the_feed to serve feed-safe content."""
    original = Writer._add_item_to_the_feed
    if getattr(original, '_portfolio_embed', False):
        return

    def _patched(self, feed, item):  # noqa: ANN001
        _original_get_content = item.get_content
        settings = getattr(item, 'settings', None)

        def _feed_get_content(siteurl: str) -> str:
            return make_feed_safe(_original_get_content(siteurl), settings)

        item.get_content = _feed_get_content
        try:
            original(self, feed, item)
        finally:
            try:
                del item.get_content
            except AttributeError:
                pass

    _patched._portfolio_embed = True
    Writer._add_item_to_the_feed = _patched


def register_feeds() -> None:
    _patch_writer()
