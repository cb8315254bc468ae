# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Django settings for the diagnostics JSON API."""

from __future__ import annotations

from plugin_diagnostics.config import FrontendConfig, get_settings

CONFIG = get_settings()
FRONTEND = CONFIG.frontend or FrontendConfig()

SECRET_KEY = FRONTEND.secret_key
DEBUG = FRONTEND.debug
ALLOWED_HOSTS = ["*"]

INSTALLED_APPS: list[str] = []

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "plugin_diagnostics.components.web.urls"
WSGI_APPLICATION = "plugin_diagnostics.components.web.wsgi.application"

DATABASES: dict[str, dict[str, str]] = {}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True
