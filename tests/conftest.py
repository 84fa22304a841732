"""
Shared fakes for the embed tests.

Nothing here touches the network: HTTP goes through FakeSession, proximity
through RecordingObserver, and slow thumbnail lookups through GatedResolver.
"""
import asyncio

import pytest

from portfolio_embed.activation import StaticCapabilities


class FakeSubscription:
    def __init__(self, margin, callback):
        self.margin = margin
        self.callback = callback
        self.closed = False
        self.close_calls = 0

    def close(self):
        self.closed = True
        self.close_calls += 1


class RecordingObserver:
    """Records subscriptions; ``signal()`` plays a proximity change to open ones."""

    def __init__(self, fire_on_observe=False):
        self.subscriptions = []
        self.fire_on_observe = fire_on_observe

    def observe(self, margin, callback):
        subscription = FakeSubscription(margin, callback)
        self.subscriptions.append(subscription)
        if self.fire_on_observe:
            callback(True)
        return subscription

    def signal(self, is_intersecting=True):
        for subscription in list(self.subscriptions):
            if not subscription.closed:
                subscription.callback(is_intersecting)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, invalid_json=False):
        self.status_code = status_code
        self.payload = payload
        self.invalid_json = invalid_json

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self.invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


class GatedResolver:
    """Resolver whose lookup only completes once ``release()`` is called."""

    def __init__(self, result=None):
        self.result = result
        self.calls = []
        self.released = False
        self._gate = None

    async def resolve(self, provider, video_id):
        self.calls.append((provider, video_id))
        # built on first use so it belongs to the loop that awaits it
        if self._gate is None:
            self._gate = asyncio.Event()
            if self.released:
                self._gate.set()
        await self._gate.wait()
        return self.result

    def release(self):
        self.released = True
        if self._gate is not None:
            self._gate.set()


class StubResolver:
    def __init__(self, result=None):
        self.result = result
        self.calls = []

    async def resolve(self, provider, video_id):
        self.calls.append((provider, video_id))
        return self.result


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def capabilities():
    return StaticCapabilities()


@pytest.fixture
def no_observation():
    return StaticCapabilities(observation=False)
