"""
Django settings for the IPN listener.

This is the single settings file for all environments. Configuration is driven
by environment variables using django-environ, following the 12-factor app
methodology.

Environment files:
    - .env.development: Development settings (DEBUG=True, sandbox endpoint)
    - .env.production: Production settings (DEBUG=False, live endpoint)

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/topics/settings/

For the full list of settings and their values, see:
https://docs.djangoproject.com/en/5.2/ref/settings/
"""

import os
from pathlib import Path

import environ

# =============================================================================
# Path Configuration
# =============================================================================
# Build paths inside the project: BASE_DIR / 'subdir'
BASE_DIR = Path(__file__).resolve().parent.parent

# =============================================================================
# Environment Configuration
# =============================================================================
# Initialize django-environ
env = environ.Env(
    # Set default values and casting for common settings
    DEBUG=(bool, False),  # Default to False for safety
    ALLOWED_HOSTS=(list, []),
    LOG_LEVEL=(str, "INFO"),
    IPN_LIVE=(bool, False),
    IPN_VERIFY_TLS=(bool, False),
    IPN_AUDIT_LOG_ENABLED=(bool, False),
    IPN_HANDLER_MODULES=(list, []),
)

# Read environment file based on ENV_FILE or default to development
# Note: In Docker, env vars are passed directly; .env files are for local dev
env_file = os.environ.get("ENV_FILE", BASE_DIR.parent / ".env.development")
if Path(env_file).exists():
    environ.Env.read_env(env_file)

# =============================================================================
# Core Settings
# =============================================================================
# SECURITY WARNING: keep the secret key used in production secret!
SECRET_KEY = env("SECRET_KEY")

# SECURITY WARNING: don't run with debug turned on in production!
DEBUG = env("DEBUG")

ALLOWED_HOSTS = env("ALLOWED_HOSTS")

# =============================================================================
# Application Definition
# =============================================================================
INSTALLED_APPS = [
    # Local apps
    "core",
    "ipn.apps.IpnConfig",
]

MIDDLEWARE = [
    # Security middleware (should be first)
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
]

ROOT_URLCONF = "config.urls"

WSGI_APPLICATION = "config.wsgi.application"

# =============================================================================
# Database Configuration
# =============================================================================
# Notifications are not persisted; handlers bring their own storage.
DATABASES = {}

# =============================================================================
# PayPal IPN Configuration
# =============================================================================
# False posts back to https://www.sandbox.paypal.com/cgi-bin/webscr,
# True to https://www.paypal.com/cgi-bin/webscr
IPN_LIVE = env("IPN_LIVE")

# SECURITY WARNING: the legacy default does NOT verify PayPal's certificate.
# Set IPN_VERIFY_TLS=True (system trust store) or IPN_CA_BUNDLE (custom
# trust anchor) in production.
IPN_VERIFY_TLS = env("IPN_VERIFY_TLS")
IPN_CA_BUNDLE = env("IPN_CA_BUNDLE", default="")

# Postback timeout in seconds; a timeout counts as a failed verification
IPN_TIMEOUT_SECONDS = env.float("IPN_TIMEOUT_SECONDS", default=30)

# Audit trail of received messages and verification results
IPN_AUDIT_LOG_ENABLED = env("IPN_AUDIT_LOG_ENABLED")
IPN_AUDIT_LOG_FILE = env("IPN_AUDIT_LOG_FILE", default="")

# Dotted paths of modules that bind handlers with @ipn_handlers.on(...)
IPN_HANDLER_MODULES = env("IPN_HANDLER_MODULES")

# =============================================================================
# Internationalization
# =============================================================================
# https://docs.djangoproject.com/en/5.2/topics/i18n/
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# =============================================================================
# Default Primary Key Field Type
# =============================================================================
# https://docs.djangoproject.com/en/5.2/ref/settings/#default-auto-field
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# =============================================================================
# Logging Configuration
# =============================================================================
LOG_LEVEL = env("LOG_LEVEL")

# Log file name determined by service
LOG_FILE_NAME = env("LOG_FILE_NAME", default="django.log")
LOG_DIR = BASE_DIR / "logs"

# Ensure log directory exists (handles local development without Docker)
LOG_DIR.mkdir(parents=True, exist_ok=True)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "{levelname} {asctime} {module} {process:d} {thread:d} {message}",
            "style": "{",
        },
        "file": {
            # Detailed format for persistent logs with timestamp, level, logger name, and location
            "format": "[{asctime}] {levelname} {name} {module}:{lineno} - {message}",
            "style": "{",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "audit": {
            "format": "{asctime} {message}",
            "style": "{",
            "datefmt": "%A, %d-%b-%Y %H:%M:%S %Z",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
        "file": {
            # Rotating file handler prevents unbounded disk usage
            # Max 10MB per file, keeps 5 backups
            "level": "DEBUG",
            "class": "logging.handlers.RotatingFileHandler",
            "filename": LOG_DIR / LOG_FILE_NAME,
            "maxBytes": 10 * 1024 * 1024,  # 10MB
            "backupCount": 5,
            "formatter": "file",
            "encoding": "utf-8",
        },
    },
    "root": {
        "handlers": ["console", "file"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django": {
            "handlers": ["console", "file"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "django.request": {
            "handlers": ["console", "file"],
            "level": "ERROR",
            "propagate": False,
        },
        "ipn": {
            "handlers": ["console", "file"],
            "level": LOG_LEVEL,
            "propagate": False,
        },
        "ipn.audit": {
            "handlers": [],
            "level": "INFO",
            "propagate": False,
        },
    },
}

# Append-only audit file, one timestamped line per event
if IPN_AUDIT_LOG_FILE:
    LOGGING["handlers"]["audit"] = {
        "class": "logging.FileHandler",
        "filename": IPN_AUDIT_LOG_FILE,
        "mode": "a",
        "formatter": "audit",
        "encoding": "utf-8",
    }
    LOGGING["loggers"]["ipn.audit"]["handlers"] = ["audit"]
elif IPN_AUDIT_LOG_ENABLED:
    # No dedicated file: audit lines go to the application log
    LOGGING["loggers"]["ipn.audit"]["handlers"] = ["file"]

# =============================================================================
# Security Settings (Production Only)
# =============================================================================
# These settings are enforced only when DEBUG=False
if not DEBUG:
    # HTTPS/SSL settings
    SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)
    SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")

    # HSTS (HTTP Strict Transport Security)
    SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", default=31536000)  # 1 year
    SECURE_HSTS_INCLUDE_SUBDOMAINS = env.bool(
        "SECURE_HSTS_INCLUDE_SUBDOMAINS", default=True
    )

    # Additional security headers
    SECURE_CONTENT_TYPE_NOSNIFF = True
    X_FRAME_OPTIONS = "DENY"
