# -*- coding: utf-8 -*-
import os

import environ


class Environments:
    PRODUCTION = "production"
    STAGING = "staging"
    DEVELOPMENT = "development"  # local development environment


def env_variable_truthy(key, default=""):
    return os.environ.get(key, default).lower().strip() in ["1", "true", "t", "y"]


env = environ.Env(
    DEBUG=(bool, False),
    POLL_INTERVAL=(float, 5.0),
    PERSIST_INTERVAL=(int, 10),
    SOURCE_TIMEOUT=(float, 10.0),
)  # set default values and casting
ENVIRONMENT = os.environ.get("APP_ENV", Environments.DEVELOPMENT).lower()
DEBUG = env_variable_truthy("DEBUG")

DATABASE_HOST = os.environ.get("DATABASE_HOST", "localhost")
DATABASE_NAME = os.environ.get("DATABASE_NAME", "txindex")
DATABASE_USER = os.environ.get("DATABASE_USER", "txindex")
DATABASE_PORT = os.environ.get("DATABASE_PORT", "5432")
DATABASE_PASSWORD = os.environ.get("DATABASE_PASSWORD", "txindex")
DATABASES = {
    "default": "DATABASE_URL" in os.environ
    and env.db("DATABASE_URL")
    or {
        "ENGINE": "django.db.backends.postgresql",
        "USER": DATABASE_USER,
        "NAME": DATABASE_NAME,
        "PASSWORD": DATABASE_PASSWORD,
        "HOST": DATABASE_HOST,
        "PORT": DATABASE_PORT,
    }
}

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "txindex.apps.ingest",
]

SITE_ROOT = PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))


def root(*x):
    return os.path.join(os.path.abspath(PROJECT_ROOT), *x)


BASE_DIR = root(PROJECT_ROOT)

USE_TZ = True
TIME_ZONE = "UTC"
LANGUAGE_CODE = "en-us"

IS_TEST = False

SECRET_KEY = os.environ.get("SECRET_KEY", "secret")

DEFAULT_AUTO_FIELD = "django.db.models.AutoField"

# Ingestion
INGEST_TX_KIND = os.environ.get("TX_TYPE") or "txfer"
INGEST_POLL_INTERVAL = env("POLL_INTERVAL")
INGEST_PERSIST_EVERY = env("PERSIST_INTERVAL")
INGEST_SOURCE_URL = os.environ.get("SOURCE_API_URL", "http://localhost:8080")
INGEST_SOURCE_TIMEOUT = env("SOURCE_TIMEOUT")
INGEST_CHECKPOINT_KEY = os.environ.get("CHECKPOINT_KEY", "singleton_metrics_state")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": ("%(levelname)s %(asctime)s |" "%(pathname)s:%(lineno)d (in %(funcName)s) |" " %(message)s ")
        },
        "simple": {"format": "%(levelname)s %(asctime)s %(name)s %(message)s"},
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose" if DEBUG else "simple",
        },
        "null": {
            "class": "logging.NullHandler",
        },
    },
    "loggers": {
        "django": {
            "handlers": ["console"],
            "level": "WARNING",
        },
        "django.db.backends": {
            "handlers": ["null"],
            "propagate": False,
        },
        "txindex": {
            "handlers": ["console"],
            "level": LOG_LEVEL,
        },
    },
}

if "SENTRY_BACKEND_URL" in os.environ:
    import sentry_sdk
    from sentry_sdk.integrations.django import DjangoIntegration

    sentry_sdk.init(
        dsn=os.environ["SENTRY_BACKEND_URL"],
        integrations=[DjangoIntegration()],
        environment=ENVIRONMENT,
        traces_sample_rate=0.0,
    )
