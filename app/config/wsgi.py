"""
WSGI config for the IPN listener.

The postback to PayPal is a blocking call made while the notification request
is open, so the listener is served by a threaded or multi-process WSGI server
(gunicorn, uWSGI) with one worker context per request.

This file exposes the WSGI callable as a module-level variable named `application`.

For more information on this file, see:
https://docs.djangoproject.com/en/5.2/howto/deployment/wsgi/
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
