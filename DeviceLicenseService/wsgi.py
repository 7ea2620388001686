"""
WSGI config for DeviceLicenseService project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "DeviceLicenseService.settings.prod")

application = get_wsgi_application()
