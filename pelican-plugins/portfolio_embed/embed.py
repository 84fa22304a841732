from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Optional

from .activation import (
    ACTIVATED,
    EAGER,
    NO_OBSERVER,
    ActivationController,
    ActivationPolicy,
    AudioActivationController,
    Capabilities,
    ProximityObserver,
    USER,
    select_policy,
)
from .providers import (
    AUDIO,
    DAILYMOTION,
    YOUTUBE,
    MediaReference,
    ProviderClassification,
    classify,
    to_audio_embeddable,
    to_embeddable,
    watch_url,
    youtube_thumbnail_url,
)
from .thumbnails import ThumbnailResolver, ThumbnailSlot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderState:
    """Everything a renderer needs to pick placeholder, play button or live frame."""

    kind: str
    classification: ProviderClassification
    embeddable_target: Optional[str]
    activation_state: str
    thumbnail_url: Optional[str]
    thumbnail_state: str
    policy: ActivationPolicy
    loaded: bool = False
    watch_url: Optional[str] = None
    trigger: Optional[str] = None

    @property
    def activated(self) -> bool:
        return self.activation_state == ACTIVATED

    @property
    def awaits_load(self) -> bool:
        # frames that went live without a page script never report a load
        if self.loaded:
            return False
        return self.trigger not in (NO_OBSERVER, EAGER)

    def to_dict(self) -> dict:
        return asdict(self)


class EmbedInstance:
    """A single rendered embed. State is never shared between instances."""

    def __init__(self, reference: MediaReference, capabilities: Capabilities,
                 observer: Optional[ProximityObserver] = None,
                 resolver: Optional[ThumbnailResolver] = None):
        self.reference = reference
        self.resolver = resolver
        self.loaded = False
        self.disposed = False
        self.thumbnail = ThumbnailSlot()
        self.classification = classify(reference.raw_url)

        if reference.kind == AUDIO:
            self.target = to_audio_embeddable(reference.raw_url)
            self.controller: ActivationController = AudioActivationController(capabilities, observer)
        else:
            self.target = to_embeddable(reference.raw_url, self.classification)
            policy = select_policy(self.classification.provider, reference.kind, capabilities)
            self.controller = ActivationController(policy, capabilities, observer)

    @property
    def is_audio(self) -> bool:
        return self.reference.kind == AUDIO

    def mount(self) -> Optional[asyncio.Task]:
        """Start watching for activation and kick off the thumbnail lookup.

        The lookup needs a running event loop; without one the thumbnail just
        stays unknown.
        """
        if self.disposed:
            return None
        self.controller.start()
        if self.is_audio or self.resolver is None:
            return None
        if self.classification.provider != DAILYMOTION or not self.classification.id:
            return None
        try:
            return self.thumbnail.begin(self.resolver, DAILYMOTION, self.classification.id)
        except RuntimeError:
            logger.debug('no running loop, skipping thumbnail lookup for %s', self.reference.raw_url)
            return None

    def play(self) -> bool:
        return self.controller.activate(USER)

    def mark_loaded(self) -> None:
        if not self.disposed:
            self.loaded = True

    def dispose(self) -> None:
        self.disposed = True
        self.controller.dispose()
        self.thumbnail.cancel()

    @property
    def thumbnail_url(self) -> Optional[str]:
        if self.is_audio:
            return None
        if self.classification.provider == YOUTUBE:
            return youtube_thumbnail_url(self.classification.id)
        return self.thumbnail.url

    def snapshot(self) -> RenderState:
        return RenderState(
            kind=self.reference.kind,
            classification=self.classification,
            embeddable_target=self.target,
            activation_state=self.controller.state,
            thumbnail_url=self.thumbnail_url,
            thumbnail_state=self.thumbnail.state,
            policy=self.controller.policy,
            loaded=self.loaded,
            watch_url=None if self.is_audio else watch_url(self.classification),
            trigger=self.controller.trigger,
        )
