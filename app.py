import asyncio
import os

from flask import Flask, jsonify, request

from portfolio_embed.embed import EmbedInstance
from portfolio_embed.plugin import DeferredObserver
from portfolio_embed.providers import AUDIO, VIDEO, MediaReference
from portfolio_embed.render import render
from portfolio_embed.settings import DEFAULT_THUMBNAIL_DEADLINE, EmbedSettings
from portfolio_embed.thumbnails import ThumbnailResolver

app = Flask(__name__)
app.secret_key = os.getenv("SECRET_KEY", "dev-only-change-me")
app.config["EMBED_SETTINGS"] = EmbedSettings.from_settings({
    # previews describe the page as the theme script sees it
    "PORTFOLIO_EMBED_OBSERVATION": True,
    "PORTFOLIO_EMBED_INTERACTION": True,
    "PORTFOLIO_THUMBNAIL_TIMEOUT": os.getenv("PORTFOLIO_THUMBNAIL_TIMEOUT"),
    "PORTFOLIO_THUMBNAIL_DEADLINE": os.getenv("PORTFOLIO_THUMBNAIL_DEADLINE", DEFAULT_THUMBNAIL_DEADLINE),
})
# tests inject a resolver here; otherwise each request gets its own session
app.config["THUMBNAIL_RESOLVER"] = None


def run_preview(reference: MediaReference, settings: EmbedSettings):
    resolver = app.config.get("THUMBNAIL_RESOLVER")
    if resolver is not None:
        return asyncio.run(preview(reference, settings, resolver))
    # requests.Session is not thread safe and Flask serves requests on threads
    resolver = ThumbnailResolver(timeout=settings.request_timeout)
    try:
        return asyncio.run(preview(reference, settings, resolver))
    finally:
        resolver.close()


async def preview(reference: MediaReference, settings: EmbedSettings, resolver: ThumbnailResolver):
    instance = EmbedInstance(reference, settings.capabilities(), DeferredObserver(), resolver)
    task = instance.mount()
    if task is not None:
        await asyncio.wait([task], timeout=settings.thumbnail_deadline)
    state = instance.snapshot()
    instance.dispose()
    return state


def read_reference():
    url = request.args.get("url", "").strip()
    kind = request.args.get("kind", VIDEO)
    if not url:
        return None, (jsonify({"error": "missing url parameter"}), 400)
    if kind not in (VIDEO, AUDIO):
        return None, (jsonify({"error": f"unsupported kind {kind!r}; use video or audio"}), 400)
    return MediaReference(url, kind), None


@app.get("/health")
def health():
    return jsonify({"status": "ok"})


@app.get("/")
def index():
    return "portfolio embed preview is running", 200


@app.get("/api/embed")
def embed_state():
    reference, error = read_reference()
    if error:
        return error
    state = run_preview(reference, app.config["EMBED_SETTINGS"])
    return jsonify(state.to_dict())


@app.get("/api/embed/html")
def embed_html():
    reference, error = read_reference()
    if error:
        return error
    settings = app.config["EMBED_SETTINGS"]
    state = run_preview(reference, settings)
    title = request.args.get("title") or ("Audio" if reference.kind == AUDIO else "Video")
    return render(state, title, settings), 200, {"Content-Type": "text/html; charset=utf-8"}


if __name__ == "__main__":
    app.run(host="127.0.0.1", port=8000, debug=True)
