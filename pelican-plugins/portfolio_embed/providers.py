"""Provider detection and embed URL normalisation for portfolio media.

Authors paste whatever link the share button gave them, so each provider
shows up in two shapes::

    https://youtu.be/abc123                      short link, id in the path
    https://www.youtube.com/watch?v=abc123&t=10  canonical, id in ``v``
    https://dai.ly/k2x9                          short link, id in the path
    https://www.dailymotion.com/video/k2x9       canonical, id after ``video``

``classify`` maps any of these (or anything else) to a provider tag and id and
never raises. ``to_embeddable`` turns the result into the URL that goes into
the frame.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import parse_qs, quote, urlsplit

YOUTUBE = 'youtube'
DAILYMOTION = 'dailymotion'
OTHER = 'other'

VIDEO = 'video'
AUDIO = 'audio'

YOUTUBE_EMBED = 'https://www.youtube-nocookie.com/embed/{id}?rel=0&modestbranding=1'
YOUTUBE_THUMBNAIL = 'https://i.ytimg.com/vi/{id}/hqdefault.jpg'
YOUTUBE_WATCH = 'https://www.youtube.com/watch?v={id}'
DAILYMOTION_EMBED = (
    'https://www.dailymotion.com/embed/video/{id}'
    '?autoplay=0&mute=0&start=0&queue-enable=0'
)
SOUNDCLOUD_PLAYER = (
    'https://w.soundcloud.com/player/?url={url}'
    '&color=%2300FFB2&auto_play=false&hide_related=true&show_comments=false'
    '&show_user=true&show_reposts=false&show_teaser=false&visual=false'
)


@dataclass(frozen=True)
class MediaReference:
    raw_url: Optional[str]
    kind: str = VIDEO


@dataclass(frozen=True)
class ProviderClassification:
    provider: str
    id: Optional[str] = None

    @property
    def is_known(self) -> bool:
        return self.provider != OTHER


UNKNOWN = ProviderClassification(OTHER, None)


def _first_segment(path: str) -> Optional[str]:
    segment = path.lstrip('/').split('/', 1)[0]
    return segment or None


def _segment_after(path: str, keyword: str) -> Optional[str]:
    parts = [part for part in path.split('/') if part]
    try:
        index = parts.index(keyword)
    except ValueError:
        return None
    if index + 1 < len(parts):
        return parts[index + 1]
    return None


def classify(raw_url: Optional[str]) -> ProviderClassification:
    """Return the provider and media id for *raw_url*.

    Malformed or unrecognised URLs come back as ``other`` with no id. A known
    host without an extractable id keeps its provider and has ``id=None``.
    """
    if not raw_url or not isinstance(raw_url, str):
        return UNKNOWN
    try:
        parts = urlsplit(raw_url.strip())
        host = (parts.hostname or '').lower()
    except ValueError:
        return UNKNOWN
    if not parts.scheme or not host:
        return UNKNOWN

    if 'youtu.be' in host:
        return ProviderClassification(YOUTUBE, _first_segment(parts.path))
    if 'youtube.com' in host:
        values = parse_qs(parts.query).get('v')
        return ProviderClassification(YOUTUBE, values[0] if values else None)
    if 'dai.ly' in host:
        return ProviderClassification(DAILYMOTION, _first_segment(parts.path))
    if 'dailymotion.com' in host:
        return ProviderClassification(DAILYMOTION, _segment_after(parts.path, 'video'))
    return UNKNOWN


def to_embeddable(raw_url: Optional[str], classification: ProviderClassification) -> Optional[str]:
    """Return the frame source for *raw_url*, or ``None`` when nothing should render."""
    if classification.provider == YOUTUBE:
        return YOUTUBE_EMBED.format(id=quote(classification.id, safe='')) if classification.id else None
    if classification.provider == DAILYMOTION:
        return DAILYMOTION_EMBED.format(id=quote(classification.id, safe='')) if classification.id else None
    return raw_url or None


def youtube_thumbnail_url(video_id: Optional[str]) -> Optional[str]:
    if not video_id:
        return None
    return YOUTUBE_THUMBNAIL.format(id=quote(video_id, safe=''))


def watch_url(classification: ProviderClassification) -> Optional[str]:
    if classification.provider == YOUTUBE and classification.id:
        return YOUTUBE_WATCH.format(id=quote(classification.id, safe=''))
    return None


def to_audio_embeddable(raw_url: Optional[str]) -> Optional[str]:
    """Wrap a SoundCloud track URL in the widget player URL."""
    if not raw_url or not isinstance(raw_url, str):
        return None
    track_url = raw_url.strip().replace('https://', 'http://')
    return SOUNDCLOUD_PLAYER.format(url=quote(track_url, safe=''))


def audio_frame_height(height: int = 300, featured: bool = False, compact: bool = True) -> int:
    if compact and not featured:
        return max(140, round(height * 0.8))
    return height
