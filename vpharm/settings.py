# vpharm/settings.py

import os
from pathlib import Path
from celery.schedules import crontab

# Base directory of the project
BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(name, default):
    return os.getenv(name, str(default)).lower() in {"1", "true", "yes"}


# SECURITY WARNING: keep the secret key used in production!
SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "django-insecure-vpharm-dev-key")

DEBUG = _env_bool("DJANGO_DEBUG", False)

raw_hosts = os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1")
ALLOWED_HOSTS = [h.strip() for h in raw_hosts.split(",") if h.strip()]

# Application definition
INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",

    # ✅ Ledger app (loads signals in apps.py)
    "ledgerapp.apps.LedgerappConfig",

    # ✅ Celery results + beat
    "django_celery_results",
    "django_celery_beat",

    # ✅ Optional dev tools
    "django_extensions",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "vpharm.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [BASE_DIR / "templates"],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.debug",
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "vpharm.wsgi.application"

# =========================
# ✅ Database (PostgreSQL in production, SQLite locally)
# =========================
if os.getenv("DB_ENGINE", "sqlite") == "postgresql":
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": os.getenv("DB_NAME", "vpharm"),
            "USER": os.getenv("DB_USER", "vpharm"),
            "PASSWORD": os.getenv("DB_PASSWORD", ""),
            "HOST": os.getenv("DB_HOST", "localhost"),
            "PORT": os.getenv("DB_PORT", "5432"),
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": BASE_DIR / "db.sqlite3",
        }
    }

# =========================
# ✅ Cache (Redis) - throttles page-load income sync triggers
# =========================
REDIS_URL = os.getenv("REDIS_URL")
if REDIS_URL:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.redis.RedisCache",
            "LOCATION": REDIS_URL,
        }
    }
else:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        }
    }

# Password validation
AUTH_PASSWORD_VALIDATORS = [
    {"NAME": "django.contrib.auth.password_validation.UserAttributeSimilarityValidator"},
    {"NAME": "django.contrib.auth.password_validation.MinimumLengthValidator"},
    {"NAME": "django.contrib.auth.password_validation.CommonPasswordValidator"},
    {"NAME": "django.contrib.auth.password_validation.NumericPasswordValidator"},
]

# Internationalization
LANGUAGE_CODE = "en-us"
# "Today" for daily income is the calendar day in this zone
TIME_ZONE = os.getenv("TIME_ZONE", "Africa/Addis_Ababa")
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

STATIC_URL = "/static/"
STATIC_ROOT = BASE_DIR / "staticfiles"

# =========================
# ✅ Celery + Redis
# =========================
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://127.0.0.1:6379/0")
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_BACKEND = "django-db"
CELERY_TASK_ALWAYS_EAGER = _env_bool("CELERY_TASK_ALWAYS_EAGER", False)

CELERY_TIMEZONE = TIME_ZONE
CELERY_ENABLE_UTC = False

CELERY_TASK_TRACK_STARTED = True
CELERY_TASK_TIME_LIMIT = 60 * 30  # 30 mins

# ==========================================================
# ✅ Celery Beat schedule (nightly income sync for all users)
# ==========================================================
CELERY_BEAT_SCHEDULE = {
    "ledger-sync-all-users": {
        "task": "ledgerapp.tasks.sync_all_users_income_task",
        "schedule": crontab(hour=0, minute=5),
        "options": {"queue": "ledger"},
    }
}

# =========================
# ✅ Ledger accrual
# =========================
LEDGER_ACCRUAL = {
    # Compare-and-swap on last_sync when committing a payout pass
    "GUARDED_COMMIT": _env_bool("LEDGER_GUARDED_COMMIT", True),
    # Regular payouts also top up the spendable recharge balance
    "CREDIT_RECHARGE_BALANCE": _env_bool("LEDGER_CREDIT_RECHARGE_BALANCE", True),
    "SYNC_ON_LOGIN": _env_bool("LEDGER_SYNC_ON_LOGIN", True),
    "TRIGGER_THROTTLE_SECONDS": int(os.getenv("LEDGER_TRIGGER_THROTTLE_SECONDS", "300")),
}

raw_recipients = os.getenv("LEDGER_REPORT_RECIPIENTS", "")
LEDGER_REPORT_RECIPIENTS = [r.strip() for r in raw_recipients.split(",") if r.strip()]
DEFAULT_FROM_EMAIL = os.getenv("DEFAULT_FROM_EMAIL", "ledger@localhost")

# =========================
# ✅ Logging
# =========================
LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "simple",
        },
    },
    "loggers": {
        "django.request": {
            "handlers": ["console"],
            "level": "ERROR",
            "propagate": False,
        },
        "django": {
            "handlers": ["console"],
            "level": "INFO",
        },
        "ledgerapp": {
            "handlers": ["console"],
            "level": os.getenv("LEDGER_LOG_LEVEL", "INFO"),
            "propagate": True,
        },
    },
}
