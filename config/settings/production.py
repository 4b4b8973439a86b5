"""
Production settings for the Sticker Registry.
"""

from .base import *

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = False

ALLOWED_HOSTS = env.list('ALLOWED_HOSTS')

# Security settings for production
SECURE_SSL_REDIRECT = env.bool('SECURE_SSL_REDIRECT', default=True)
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
SECURE_HSTS_SECONDS = 31536000  # 1 year
SECURE_HSTS_INCLUDE_SUBDOMAINS = True
SECURE_HSTS_PRELOAD = True
SECURE_CONTENT_TYPE_NOSNIFF = True
X_FRAME_OPTIONS = 'DENY'

# CORS settings for production (configure based on your needs)
CORS_ALLOWED_ORIGINS = env.list('CORS_ALLOWED_ORIGINS', default=[])

# Adjust logging for production
LOGGING['handlers']['file']['filename'] = env('LOG_FILE', default='/var/log/sticker_registry/app.log')

# Production cache configuration (override defaults to avoid localhost Redis)
# Provide the Redis URL via CACHE_DEFAULT_URL (fallback to REDIS_URL)
_CACHE_DEFAULT_URL = env('CACHE_DEFAULT_URL', default=env('REDIS_URL', default='redis://localhost:6379/0'))

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.redis.RedisCache',
        'LOCATION': _CACHE_DEFAULT_URL,
        'KEY_PREFIX': 'sticker_registry',
        'TIMEOUT': 300,
        'VERSION': 1,
    },
}
