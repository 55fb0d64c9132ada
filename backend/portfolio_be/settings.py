import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR.parent / '.env')


def env_bool(key, default=False):
    return os.getenv(key, str(default)).strip().lower() in ('1', 'true', 'yes', 'on')


def env_list(key, default=''):
    return [item.strip() for item in os.getenv(key, default).split(',') if item.strip()]


# === Core ===
SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'dev-only-secret-key-change-me-before-deploying-anywhere')
DEBUG = env_bool('DEBUG', False)
ENVIRONMENT = os.getenv('ENVIRONMENT', 'development')
ALLOWED_HOSTS = env_list('ALLOWED_HOSTS', 'localhost,127.0.0.1')
PORT = int(os.getenv('PORT', '8000'))

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'corsheaders',
    'rest_framework',
    'accounts',
    'core',
]

MIDDLEWARE = [
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'portfolio_be.urls'
WSGI_APPLICATION = 'portfolio_be.wsgi.application'
ASGI_APPLICATION = 'portfolio_be.asgi.application'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

# === Database ===
DB_ENGINE = os.getenv('DB_ENGINE', 'django.db.backends.sqlite3')
DATABASES = {
    'default': {
        'ENGINE': DB_ENGINE,
        'NAME': os.getenv('DB_NAME') or str(BASE_DIR / 'db.sqlite3'),
        'USER': os.getenv('DB_USER', ''),
        'PASSWORD': os.getenv('DB_PASSWORD', ''),
        'HOST': os.getenv('DB_HOST', ''),
        'PORT': os.getenv('DB_PORT', ''),
    }
}
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

AUTH_USER_MODEL = 'accounts.User'
AUTH_PASSWORD_VALIDATORS = [
    {'NAME': 'django.contrib.auth.password_validation.MinimumLengthValidator', 'OPTIONS': {'min_length': 6}},
]

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.getenv('TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'

# uploads/<projects|skills|avatars>/<generated name>
MEDIA_ROOT = os.getenv('UPLOAD_ROOT') or str(BASE_DIR / 'uploads')
MEDIA_URL = '/uploads/'
DATA_UPLOAD_MAX_MEMORY_SIZE = 10 * 1024 * 1024

# === CORS ===
CORS_ALLOWED_ORIGINS = env_list('CORS_ALLOWED_ORIGIN', 'http://localhost:5173')

# === Email ===
EMAIL_BACKEND = os.getenv('EMAIL_BACKEND', 'django.core.mail.backends.smtp.EmailBackend')
EMAIL_HOST = os.getenv('EMAIL_HOST', 'localhost')
EMAIL_PORT = int(os.getenv('EMAIL_PORT', '587'))
EMAIL_HOST_USER = os.getenv('EMAIL_HOST_USER', '')
EMAIL_HOST_PASSWORD = os.getenv('EMAIL_HOST_PASSWORD', '')
EMAIL_USE_TLS = env_bool('EMAIL_USE_TLS', True)
EMAIL_TIMEOUT = 10
DEFAULT_FROM_EMAIL = os.getenv('DEFAULT_FROM_EMAIL', 'Portfolio <noreply@localhost>')
CONTACT_RECEIVER_EMAIL = os.getenv('CONTACT_RECEIVER_EMAIL', '')

# === Auth tokens ===
PORTFOLIO_AUTH = {
    'JWT_SECRET': os.getenv('JWT_SECRET') or SECRET_KEY,
    'JWT_ALGORITHM': os.getenv('JWT_ALGORITHM', 'HS256'),
    'JWT_EXPIRES_IN': int(os.getenv('JWT_EXPIRES_IN', str(30 * 24 * 3600))),  # seconds
}

# === Caches ===
RATE_LIMIT_REDIS_URL = os.getenv('RATE_LIMIT_REDIS_URL', '')
CACHES = {
    'default': {'BACKEND': 'django.core.cache.backends.locmem.LocMemCache'},
    # throttle histories; Redis when several instances serve the API
    'ratelimit': {
        'BACKEND': 'django.core.cache.backends.redis.RedisCache',
        'LOCATION': RATE_LIMIT_REDIS_URL,
    } if RATE_LIMIT_REDIS_URL else {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'portfolio-ratelimit',
        'OPTIONS': {'MAX_ENTRIES': 10000},
    },
}

# === Rate limiting ===
PORTFOLIO_RATE_LIMIT = {
    'CACHE_ALIAS': os.getenv('RATE_LIMIT_CACHE_ALIAS', 'ratelimit'),
}

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': ['accounts.authentication.JWTAuthentication'],
    'DEFAULT_PERMISSION_CLASSES': ['accounts.gate.AccessGate'],
    'DEFAULT_THROTTLE_CLASSES': ['core.throttling.PortfolioRateThrottle'],
    'DEFAULT_THROTTLE_RATES': {
        'api': os.getenv('RATE_LIMIT_API', '100/15m'),
        'contact': os.getenv('RATE_LIMIT_CONTACT', '5/h'),
        'login': os.getenv('RATE_LIMIT_LOGIN', '10/15m'),
    },
    'DEFAULT_RENDERER_CLASSES': ['rest_framework.renderers.JSONRenderer'],
    'DEFAULT_PARSER_CLASSES': [
        'rest_framework.parsers.JSONParser',
        'rest_framework.parsers.FormParser',
        'rest_framework.parsers.MultiPartParser',
    ],
    'EXCEPTION_HANDLER': 'core.exceptions.api_exception_handler',
    'UNAUTHENTICATED_USER': 'django.contrib.auth.models.AnonymousUser',
}

# === Logging ===
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'plain': {'format': '%(asctime)s %(levelname)s %(name)s %(message)s'},
    },
    'handlers': {
        'console': {'class': 'logging.StreamHandler', 'formatter': 'plain'},
    },
    'root': {'handlers': ['console'], 'level': LOG_LEVEL},
    'loggers': {
        'django': {'handlers': ['console'], 'level': 'WARNING', 'propagate': False},
    },
}
