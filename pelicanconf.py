
# --- Site Information ---
SITENAME = 'portfolio'
SITEURL = ''
SITESUBTITLE = 'music, mixing and video work'

# --- Paths ---
PATH = 'content'
ARTICLE_PATHS = ['articles']
PAGE_PATHS = ['pages']
STATIC_PATHS = ['media', 'extra']

# --- Content Settings ---
TIMEZONE = 'UTC'
DEFAULT_LANG = 'en'
PAGE_SAVE_AS = '{slug}.html'
PAGE_URL = '{slug}.html'
DELETE_OUTPUT_DIRECTORY = True

# --- Feed Settings (disabled for development) ---
FEED_ALL_ATOM = None
CATEGORY_FEED_ATOM = None
TRANSLATION_FEED_ATOM = None
AUTHOR_FEED_ATOM = None
AUTHOR_FEED_RSS = None

# --- Plugins ---
PLUGIN_PATHS = ['pelican-plugins']
PLUGINS = ['portfolio_embed']
# Optional plugin settings
PORTFOLIO_EMBED_CLASS = 'portfolio-embed'
PORTFOLIO_AUDIO_CLASS = 'portfolio-audio'
# Point at the theme's activation script to render embeds dormant; without it
# every embed is emitted live with loading="lazy".
# PORTFOLIO_EMBED_SCRIPT = '/theme/js/portfolio-embed.js'
PORTFOLIO_RESOLVE_THUMBNAILS = True

# --- Markdown Extensions ---
MARKDOWN = {
    'extensions': [
        'markdown.extensions.extra',
        'markdown.extensions.meta',
    ],
    'output_format': 'html5',
}

# --- URL Settings ---
RELATIVE_URLS = True

DISPLAY_PAGES_ON_MENU = True
