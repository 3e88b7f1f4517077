import os

APP_DIR = os.path.dirname(os.path.abspath(__file__))
CONFIG_DIR = os.environ.get('PORTAL_CONFIG_DIR', os.path.join(APP_DIR, 'config'))
DB_FILE = os.path.join(CONFIG_DIR, 'portal.db')
CONFIG_FILE = os.path.join(CONFIG_DIR, 'settings.yaml')

PORTAL_DB = 'sqlite:///' + DB_FILE

BUILD_VERSION = '20261019_0930'

DEFAULT_SETTINGS = {
    "database": {
        "url": None,
        # Hosted Postgres plans cap connections, keep the pool small
        "pool_size": 2,
        "pool_timeout": 15,
        "pool_recycle": 1800,
        "slow_query_ms": 100,
    },
    "auth": {
        "admin_password_hash": "",
        "secure_cookies": True,
        "cookie_max_age": 60 * 60 * 24,
    },
    "recaptcha": {
        "secret_key": "",
        "verify_url": "https://www.google.com/recaptcha/api/siteverify",
        "timeout": 10,
    },
    "deals": {
        "sync_enabled": True,
        "sync_interval_hours": 24,
        "api_url": "https://www.cheapshark.com/api/1.0/deals",
        "timeout": 15,
    },
    "pagination": {
        "admin_page_size": 20,
        "deals_page_size": 12,
        "max_page_size": 100,
    },
}

# Cookies shared between the login endpoint and the request guard
AUTH_COOKIE = 'admin_auth'
AUTH_COOKIE_VALUE = 'true'
CSRF_COOKIE = 'csrf_token'
CSRF_HEADER = 'X-CSRF-Token'
MUTATING_METHODS = ('POST', 'PUT', 'PATCH', 'DELETE')

# Public key -> content type key, used by view tracking
VIEW_TRACKING_TYPES = {
    'games': 'games',
    'blogs': 'blogs',
    'products': 'products',
}

# Sidebar section names used by the storefront
SIDEBAR_SECTIONS = {
    'games': 'games',
    'blog': 'blogs',
    'shop': 'products',
}

CATEGORY_DEFAULT_ICONS = {
    'games': 'Gamepad2',
    'blogs': 'Book',
    'products': 'ShoppingBag',
}

COMMENT_STATUSES = ('pending', 'approved', 'rejected')
COMMENT_AUTHOR_LENGTH = (2, 50)
COMMENT_TEXT_LENGTH = (10, 1000)

SITE_SETTING_DEFAULTS = {
    'site_name': 'G2gaming',
    'site_icon_url': '',
    'ogads_script_src': '',
    'hero_title': 'Welcome to G2gaming',
    'hero_subtitle': 'Your ultimate destination for the latest games, reviews, and gear.',
    'hero_button_text': 'Explore Games',
    'hero_button_url': '/games',
    'hero_bg_url': '',
    'promo_enabled': 'false',
    'promo_text': '',
    'promo_button_text': '',
    'promo_button_url': '',
    'recaptcha_site_key': '',
}

BOOLEAN_SITE_SETTINGS = ('promo_enabled',)

# CheapShark store ids
DEAL_STORE_NAMES = {
    '1': 'Steam',
    '2': 'GamersGate',
    '3': 'GreenManGaming',
    '4': 'Amazon',
    '5': 'GameStop',
    '6': 'Direct2Drive',
    '7': 'GOG',
    '8': 'Origin',
    '11': 'Humble Store',
    '13': 'Uplay',
    '15': 'Fanatical',
    '25': 'Epic Games Store',
    '35': 'Blizzard Shop',
}

DEAL_STORE_TAGS = {
    'Steam': ['steam'],
    'Epic Games Store': ['epic'],
    'GOG': ['gog', 'drm-free'],
}

CHEAPSHARK_SOURCE = 'cheapshark'
CHEAPSHARK_REDIRECT_URL = 'https://www.cheapshark.com/redirect?dealID={deal_id}'

DEAL_SORT_OPTIONS = ('newest', 'ending_soon', 'value')
