"""
Celery configuration for the production tracker.

DJANGO_SETTINGS_MODULE is set before the app is instantiated so Celery
reads the Django settings (``CELERY_`` prefix), including the beat
schedule that relays the order outbox.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

app = Celery("production_tracker")

app.config_from_object("django.conf:settings", namespace="CELERY")

# Discover tasks.py in every installed app
app.autodiscover_tasks()
