from .base import *  # noqa: F403
from .base import BASE_DIR, LOGGING

SECRET_KEY = "test-secret-key"
DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost", "127.0.0.1"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "test-db.sqlite3",
        "OPTIONS": {"timeout": 20},
        "TEST": {"NAME": BASE_DIR / "test-db.sqlite3"},
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "paper-radar-tests",
    }
}

SESSION_ENGINE = "django.contrib.sessions.backends.db"

CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"
CELERY_TASK_ALWAYS_EAGER = False

EMBED_SERVICE_URL = "http://embed.test/embed"
EMBED_SERVICE_TIMEOUT_SECONDS = 2.0

JOURNALS_TAXONOMY_PATH = BASE_DIR / "tests" / "fixtures" / "journals.yml"

LOGGING = {**LOGGING, "root": {"handlers": ["console"], "level": "WARNING"}}
