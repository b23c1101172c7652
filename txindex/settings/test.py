from .project import *  # noqa

IS_TEST = True

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

INGEST_POLL_INTERVAL = 0.01
LOGGING["loggers"]["txindex"]["level"] = "DEBUG"  # noqa: F405
