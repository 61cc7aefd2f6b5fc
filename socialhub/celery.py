import os
from celery import Celery
from celery.schedules import crontab


os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'socialhub.settings')
app = Celery('socialhub')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()


app.conf.beat_schedule = {
    # ✅ Re-derive reaction/comment counters from the ledger (Nightly)
    'reconcile-interaction-counters-every-day': {
        'task': 'apps.posts.tasks.reconcile_interaction_counters_task',
        'schedule': crontab(hour=3, minute=0),
    },
}


# celery -A socialhub worker -l info
# celery -A socialhub beat -l info
