"""Preview images for providers without a predictable thumbnail URL.

YouTube thumbnails follow a fixed template (see ``providers``). Dailymotion
needs one metadata request per video::

    GET https://api.dailymotion.com/video/<id>?fields=thumbnail_url
    -> {"thumbnail_url": "https://s1.dmcdn.net/..."}

A failed lookup only means the embed shows no preview image, so every error is
logged and swallowed here and nothing is retried.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

import requests

from .providers import DAILYMOTION

logger = logging.getLogger(__name__)

DAILYMOTION_METADATA = 'https://api.dailymotion.com/video/{id}'

UNKNOWN = 'unknown'
RESOLVED = 'resolved'
UNRESOLVED = 'unresolved'


class ThumbnailResolver:
    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.session = session or requests.Session()
        self.timeout = timeout

    def close(self) -> None:
        self.session.close()

    def _fetch(self, video_id: str) -> Optional[str]:
        response = self.session.get(
            DAILYMOTION_METADATA.format(id=video_id),
            params={'fields': 'thumbnail_url'},
            timeout=self.timeout,
        )
        if not response.ok:
            logger.debug('thumbnail lookup for %s returned HTTP %s', video_id, response.status_code)
            return None
        data = response.json()
        if not isinstance(data, dict):
            return None
        thumbnail = data.get('thumbnail_url')
        if isinstance(thumbnail, str) and thumbnail:
            return thumbnail
        return None

    async def resolve(self, provider: str, video_id: Optional[str]) -> Optional[str]:
        """Return the preview image URL, or ``None`` if there is none to be had."""
        if provider != DAILYMOTION or not video_id:
            return None
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._fetch, video_id)
        except (requests.RequestException, ValueError) as exc:
            logger.debug('thumbnail lookup for %s failed: %s', video_id, exc)
            return None


class ThumbnailSlot:
    """Per-embed thumbnail state; settles at most once.

    ``cancel()`` bumps the generation so a lookup that finishes after the
    embed was disposed is dropped instead of written.
    """

    def __init__(self):
        self.state = UNKNOWN
        self.url: Optional[str] = None
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def begin(self, resolver, provider: str, video_id: Optional[str]) -> Optional[asyncio.Task]:
        if self._task is not None or self.state != UNKNOWN:
            return None
        if provider != DAILYMOTION or not video_id:
            return None
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(self._generation, resolver, provider, video_id))
        return self._task

    async def _run(self, generation: int, resolver, provider: str, video_id: str) -> None:
        url = await resolver.resolve(provider, video_id)
        if generation != self._generation or self.state != UNKNOWN:
            return
        if url:
            self.state, self.url = RESOLVED, url
        else:
            self.state = UNRESOLVED

    def cancel(self) -> None:
        self._generation += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
