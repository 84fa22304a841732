"""Plugin settings, read from ``pelicanconf.py``::

    PORTFOLIO_EMBED_CLASS = 'portfolio-embed'   # outer figure class for video
    PORTFOLIO_AUDIO_CLASS = 'portfolio-audio'   # outer figure class for audio
    PORTFOLIO_EMBED_SCRIPT = None               # page script the theme loads to activate embeds
    PORTFOLIO_EMBED_OBSERVATION = None          # defaults to True when a script is set
    PORTFOLIO_EMBED_INTERACTION = None          # defaults to True when a script is set
    PORTFOLIO_EMBED_REDUCED_MOTION = None       # True disables the placeholder pulse
    PORTFOLIO_EMBED_COARSE_POINTER = None       # True shrinks the video lookahead margin
    PORTFOLIO_RESOLVE_THUMBNAILS = True         # look up Dailymotion previews at build time
    PORTFOLIO_THUMBNAIL_TIMEOUT = None          # per request seconds, None falls back to the deadline
    PORTFOLIO_THUMBNAIL_DEADLINE = 5.0          # seconds a page waits for its lookups, None waits

Without a page script nothing in the browser can observe proximity or handle
the play button, so embeds are rendered live and left to the browser's own
``loading="lazy"``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .activation import StaticCapabilities

DEFAULT_THUMBNAIL_DEADLINE = 5.0


def _seconds(value) -> Optional[float]:
    return float(value) if value not in (None, '') else None


@dataclass(frozen=True)
class EmbedSettings:
    embed_class: str = 'portfolio-embed'
    audio_class: str = 'portfolio-audio'
    script: Optional[str] = None
    observation: bool = True
    interaction: bool = True
    reduced_motion: Optional[bool] = None
    coarse_pointer: Optional[bool] = None
    resolve_thumbnails: bool = True
    thumbnail_timeout: Optional[float] = None
    thumbnail_deadline: Optional[float] = DEFAULT_THUMBNAIL_DEADLINE

    @classmethod
    def from_settings(cls, settings) -> 'EmbedSettings':
        settings = settings or {}
        script = settings.get('PORTFOLIO_EMBED_SCRIPT') or None
        observation = settings.get('PORTFOLIO_EMBED_OBSERVATION')
        interaction = settings.get('PORTFOLIO_EMBED_INTERACTION')
        return cls(
            embed_class=settings.get('PORTFOLIO_EMBED_CLASS', cls.embed_class),
            audio_class=settings.get('PORTFOLIO_AUDIO_CLASS', cls.audio_class),
            script=script,
            observation=bool(script) if observation is None else bool(observation),
            interaction=bool(script) if interaction is None else bool(interaction),
            reduced_motion=settings.get('PORTFOLIO_EMBED_REDUCED_MOTION'),
            coarse_pointer=settings.get('PORTFOLIO_EMBED_COARSE_POINTER'),
            resolve_thumbnails=bool(settings.get('PORTFOLIO_RESOLVE_THUMBNAILS', True)),
            thumbnail_timeout=_seconds(settings.get('PORTFOLIO_THUMBNAIL_TIMEOUT')),
            thumbnail_deadline=_seconds(settings.get('PORTFOLIO_THUMBNAIL_DEADLINE', DEFAULT_THUMBNAIL_DEADLINE)),
        )

    @property
    def request_timeout(self) -> Optional[float]:
        # a lookup abandoned at the deadline must not keep its worker thread busy much longer
        if self.thumbnail_timeout is not None:
            return self.thumbnail_timeout
        return self.thumbnail_deadline

    def capabilities(self) -> StaticCapabilities:
        return StaticCapabilities(
            observation=self.observation,
            reduced_motion=self.reduced_motion,
            coarse=self.coarse_pointer,
            interaction=self.interaction,
        )
