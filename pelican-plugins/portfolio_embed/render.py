"""HTML for embed snapshots.

A dormant video renders as::

    <figure class="portfolio-embed" data-provider="youtube" data-activation="proximity"
            data-root-margin="400px 0px" data-embed-src="https://www.youtube-nocookie.com/embed/...">
      <div class="portfolio-embed-frame">
        <div class="portfolio-embed-placeholder is-pulsing" aria-hidden="true"></div>
        <img class="portfolio-embed-thumbnail" src="https://i.ytimg.com/vi/.../hqdefault.jpg" ...>
        <noscript><iframe ...></iframe></noscript>
      </div>
      <a class="portfolio-embed-watch" href="https://www.youtube.com/watch?v=...">Watch on YouTube</a>
    </figure>

The page script swaps the placeholder for the frame once the figure gets
close to the viewport; ``<noscript>`` keeps the frame reachable without it.
"""
from __future__ import annotations

from html import escape
from typing import List, Optional

from .activation import NO_OBSERVER, PROXIMITY
from .embed import RenderState
from .providers import AUDIO, DAILYMOTION, YOUTUBE, audio_frame_height
from .settings import EmbedSettings

VIDEO_ALLOW = 'accelerometer; autoplay; clipboard-write; encrypted-media; gyroscope; picture-in-picture; web-share'
DAILYMOTION_ALLOW = 'accelerometer; clipboard-write; encrypted-media; gyroscope; picture-in-picture'


def _attr(value) -> str:
    return escape(str(value), quote=True)


def _figure_open(state: RenderState, css_class: str) -> str:
    attrs = [
        f'class="{css_class}"',
        f'data-provider="{state.classification.provider}"',
        f'data-activation="{state.policy.mode}"',
        f'data-state="{state.activation_state}"',
    ]
    if state.policy.mode == PROXIMITY and state.policy.margin:
        attrs.append(f'data-root-margin="{state.policy.margin}"')
    attrs.append(f'data-embed-src="{_attr(state.embeddable_target)}"')
    if state.thumbnail_url:
        attrs.append(f'data-thumbnail="{_attr(state.thumbnail_url)}"')
    return f'<figure {" ".join(attrs)}>'


def _placeholder(state: RenderState, css_class: str) -> str:
    pulse = ' is-pulsing' if state.policy.animate_placeholder else ''
    return f'<div class="{css_class}-placeholder{pulse}" aria-hidden="true"></div>'


def video_iframe(state: RenderState, title: str, css_class: str) -> str:
    provider = state.classification.provider
    allow = DAILYMOTION_ALLOW if provider == DAILYMOTION else VIDEO_ALLOW
    # without a proximity script the browser's own lazy loading stands in for it
    eager = provider == YOUTUBE and state.trigger != NO_OBSERVER
    loading = 'eager' if eager else 'lazy'
    return (
        f'<iframe class="{css_class}-iframe" src="{_attr(state.embeddable_target)}" title="{_attr(title)}" '
        f'frameborder="0" allow="{allow}" loading="{loading}" allowfullscreen></iframe>'
    )


def render_video(state: RenderState, title: str = 'Video', css_class: str = 'portfolio-embed') -> str:
    if not state.embeddable_target:
        return ''
    provider = state.classification.provider
    lines: List[str] = [_figure_open(state, css_class), f'  <div class="{css_class}-frame">']
    if not state.activated:
        lines.append(f'    {_placeholder(state, css_class)}')
    if state.awaits_load and state.thumbnail_url:
        lines.append(
            f'    <img class="{css_class}-thumbnail" src="{_attr(state.thumbnail_url)}" '
            f'alt="{_attr(title)} thumbnail" loading="lazy" decoding="async">'
        )
    if provider == DAILYMOTION and not state.activated:
        lines.append(
            f'    <button type="button" class="{css_class}-play" aria-label="Play video" data-embed-play>'
            '<svg width="32" height="32" viewBox="0 0 32 32" aria-hidden="true">'
            '<polygon points="12,8 25,16 12,24" fill="#FFFFFF" /></svg></button>'
        )
    if state.activated:
        lines.append(f'    {video_iframe(state, title, css_class)}')
    elif state.policy.mode == PROXIMITY:
        lines.append(f'    <noscript>{video_iframe(state, title, css_class)}</noscript>')
    lines.append('  </div>')
    if state.watch_url:
        lines.append(
            f'  <a class="{css_class}-watch" href="{_attr(state.watch_url)}" '
            'target="_blank" rel="noopener noreferrer">Watch on YouTube</a>'
        )
    lines.append('</figure>')
    return '\n'.join(lines)


def audio_iframe(state: RenderState, title: str, height: int) -> str:
    return (
        f'<iframe width="100%" height="{height}" scrolling="no" frameborder="no" allow="autoplay" '
        f'loading="lazy" src="{_attr(state.embeddable_target)}" title="{_attr(title)}"></iframe>'
    )


def render_audio(state: RenderState, title: str = 'Audio', css_class: str = 'portfolio-audio',
                 height: int = 300, featured: bool = False, compact: bool = True) -> str:
    if not state.embeddable_target:
        return ''
    frame_height = audio_frame_height(height, featured, compact)
    featured_class = f' {css_class}-featured' if featured else ''
    lines: List[str] = [
        _figure_open(state, css_class + featured_class),
        f'  <div class="{css_class}-frame" style="height: {frame_height}px;">',
    ]
    if state.awaits_load:
        lines.append(f'    <div class="{css_class}-loading">Loading audio...</div>')
    if state.activated:
        lines.append(f'    {audio_iframe(state, title, frame_height)}')
    else:
        lines.append(f'    {_placeholder(state, css_class)}')
        lines.append(f'    <noscript>{audio_iframe(state, title, frame_height)}</noscript>')
    lines.append('  </div>')
    lines.append('</figure>')
    return '\n'.join(lines)


def render(state: RenderState, title: str, settings: Optional[EmbedSettings] = None) -> str:
    settings = settings or EmbedSettings()
    if state.kind == AUDIO:
        return render_audio(state, title, css_class=settings.audio_class)
    return render_video(state, title, css_class=settings.embed_class)
