"""Portfolio media embeds for Pelican.

Expands ``[[embed:URL|Title]]`` and ``[[audio:URL|Title]]`` markers into lazily
activated YouTube, Dailymotion and SoundCloud frames, and keeps feeds readable.
"""
from .activation import ActivationController, AudioActivationController, StaticCapabilities, select_policy
from .embed import EmbedInstance, RenderState
from .providers import MediaReference, ProviderClassification, classify, to_embeddable
from .thumbnails import ThumbnailResolver


def register():  # Pelican entry point
    from .feeds import register_feeds
    from .plugin import register_markers

    register_markers()
    register_feeds()


__all__ = [
    'ActivationController',
    'AudioActivationController',
    'EmbedInstance',
    'MediaReference',
    'ProviderClassification',
    'RenderState',
    'StaticCapabilities',
    'ThumbnailResolver',
    'classify',
    'register',
    'select_policy',
    'to_embeddable',
]
