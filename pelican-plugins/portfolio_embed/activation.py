"""When does an embed stop being a placeholder and start loading the real frame?

Each embed owns one :class:`ActivationController`. It starts ``dormant`` and
moves to ``activated`` exactly once, on whichever comes first of:

* the container coming within the lookahead margin of the viewport,
* the host having no way to observe proximity (activate immediately),
* a provider that is loaded eagerly by default (unknown hosts),
* the visitor pressing the play button (click-to-play providers), or
  straight away when the host has no way to deliver that click.

The host environment is reached only through the :class:`Capabilities` and
:class:`ProximityObserver` interfaces so the controller can run anywhere: the
Pelican build, the preview service, or a test.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol

from .providers import AUDIO, DAILYMOTION, OTHER, YOUTUBE

logger = logging.getLogger(__name__)

DORMANT = 'dormant'
ACTIVATED = 'activated'

EAGER = 'eager'
PROXIMITY = 'proximity'
CLICK = 'click'

NO_OBSERVER = 'no-observer'
USER = 'user'

VIDEO_MARGIN = '400px 0px'
AUDIO_MARGIN = '200px 0px'


class Subscription(Protocol):
    def close(self) -> None: ...


class ProximityObserver(Protocol):
    def observe(self, margin: str, callback: Callable[[bool], None]) -> Subscription: ...


class Capabilities(Protocol):
    def observation_supported(self) -> bool: ...

    def prefers_reduced_motion(self) -> Optional[bool]: ...

    def coarse_pointer(self) -> Optional[bool]: ...

    def interaction_supported(self) -> bool: ...


@dataclass
class StaticCapabilities:
    """Fixed answers to the capability queries; ``None`` means "cannot tell"."""

    observation: bool = True
    reduced_motion: Optional[bool] = None
    coarse: Optional[bool] = None
    interaction: bool = True

    def observation_supported(self) -> bool:
        return self.observation

    def prefers_reduced_motion(self) -> Optional[bool]:
        return self.reduced_motion

    def coarse_pointer(self) -> Optional[bool]:
        return self.coarse

    def interaction_supported(self) -> bool:
        return self.interaction


@dataclass(frozen=True)
class ActivationPolicy:
    mode: str
    margin: Optional[str] = None
    animate_placeholder: bool = True


def _ask(capabilities, query: str) -> bool:
    # a host that cannot answer counts as "no preference"
    method = getattr(capabilities, query, None)
    if method is None:
        return False
    try:
        return bool(method())
    except NotImplementedError:
        return False


def select_policy(provider: str, kind: str, capabilities: Capabilities) -> ActivationPolicy:
    animate = not _ask(capabilities, 'prefers_reduced_motion')
    if kind == AUDIO:
        return ActivationPolicy(PROXIMITY, AUDIO_MARGIN, animate)
    if provider == OTHER:
        return ActivationPolicy(EAGER, None, animate)
    if provider == DAILYMOTION:
        # nothing can press the play button, so load it like an unknown host
        if not _ask(capabilities, 'interaction_supported'):
            return ActivationPolicy(EAGER, None, animate)
        return ActivationPolicy(CLICK, None, animate)
    if provider == YOUTUBE:
        margin = AUDIO_MARGIN if _ask(capabilities, 'coarse_pointer') else VIDEO_MARGIN
        return ActivationPolicy(PROXIMITY, margin, animate)
    return ActivationPolicy(EAGER, None, animate)


def _observation_supported(capabilities: Capabilities) -> bool:
    return _ask(capabilities, 'observation_supported')


class ActivationController:
    """One-way ``dormant`` -> ``activated`` switch for a single embed."""

    def __init__(self, policy: ActivationPolicy, capabilities: Capabilities,
                 observer: Optional[ProximityObserver] = None):
        self.policy = policy
        self.capabilities = capabilities
        self.observer = observer
        self.state = DORMANT
        self.trigger: Optional[str] = None
        self.disposed = False
        self._subscription: Optional[Subscription] = None
        self._listeners: List[Callable[[str], None]] = []

    @property
    def activated(self) -> bool:
        return self.state == ACTIVATED

    @property
    def observing(self) -> bool:
        return self._subscription is not None

    def on_activate(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def start(self) -> None:
        if self.activated or self.disposed or self._subscription is not None:
            return
        mode = self.policy.mode
        if mode == EAGER:
            self.activate(EAGER)
        elif mode == PROXIMITY:
            if self.observer is None or not _observation_supported(self.capabilities):
                self.activate(NO_OBSERVER)
                return
            subscription = self.observer.observe(self.policy.margin or VIDEO_MARGIN, self._on_proximity)
            # observers may report an already-visible target from inside observe()
            if self.activated or self.disposed:
                subscription.close()
            else:
                self._subscription = subscription

    def _on_proximity(self, is_intersecting: bool) -> None:
        if not is_intersecting or self.disposed:
            return
        self.activate(PROXIMITY)

    def activate(self, trigger: str = USER) -> bool:
        """Move to ``activated``; returns ``False`` if nothing changed."""
        if self.activated or self.disposed:
            return False
        self.state = ACTIVATED
        self.trigger = trigger
        self._release()
        logger.debug('embed activated (mode=%s, trigger=%s)', self.policy.mode, trigger)
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            listener(trigger)
        return True

    def dispose(self) -> None:
        self.disposed = True
        self._listeners = []
        self._release()

    def _release(self) -> None:
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.close()


class AudioActivationController(ActivationController):
    """Audio frames only wait for proximity, with the smaller lookahead."""

    def __init__(self, capabilities: Capabilities, observer: Optional[ProximityObserver] = None):
        super().__init__(select_policy(OTHER, AUDIO, capabilities), capabilities, observer)
