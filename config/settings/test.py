"""
Test settings for the Sticker Registry.
Runs against an in-memory SQLite database with console-only logging.
"""

from .base import *

DEBUG = False

ALLOWED_HOSTS = ['testserver', 'localhost']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
        'CONN_MAX_AGE': 0,
        'OPTIONS': {},
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'sticker_registry_test_cache',
    },
}

# Make password hashers faster for tests
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

CORE_OPERATION_TIMEOUT = 5.0

# No log files during test runs
LOGGING['handlers'].pop('file')
for _logger in LOGGING['loggers'].values():
    _logger['handlers'] = ['console']
    _logger['level'] = 'WARNING'
