"""Django settings for cognitrack.

The apps are pure scoring and analysis helpers, so no database, templates
or middleware are configured.
"""
import os

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "cognitrack-insecure-development-key")
DEBUG = os.environ.get("DJANGO_DEBUG", "False") == "True"

INSTALLED_APPS = [
    "cognitrack.tasks",
    "cognitrack.analysis",
    "cognitrack.covariates",
]

DATABASES = {}
USE_TZ = True
TIME_ZONE = "UTC"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# ── Scoring ───────────────────────────────────────────────────────────────────
# Fraction of the score lost per switch away from the test window, and the
# lowest validity factor that can be applied.
COGNITRACK_VALIDITY_PENALTY_PER_SWITCH = 0.05
COGNITRACK_VALIDITY_FACTOR_FLOOR = 0.7

# ── Analysis ──────────────────────────────────────────────────────────────────
COGNITRACK_SIGNIFICANCE_ALPHA = 0.05
COGNITRACK_MIN_PERIOD_SAMPLE_SIZE = 3
# Impact (percentage points) at which a change counts as positive/negative;
# twice this is "very" positive/negative.
COGNITRACK_IMPACT_THRESHOLD = 5

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(levelname)s %(asctime)s %(module)s %(process)d %(thread)d %(message)s",
        },
    },
    "handlers": {
        "console": {
            "level": "DEBUG",
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {"level": "INFO", "handlers": ["console"]},
    "loggers": {
        "cognitrack": {
            "level": os.environ.get("COGNITRACK_LOG_LEVEL", "INFO"),
            "handlers": ["console"],
            "propagate": False,
        },
    },
}
