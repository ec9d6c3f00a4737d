import os

from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'app_backend.settings')

app = Celery('app_backend')

# Read CELERY_* keys from Django settings
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()
