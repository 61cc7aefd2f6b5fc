# apps/posts/tasks.py
from celery import shared_task

from apps.posts.services.counters import reconcile_interaction_counters


@shared_task
def reconcile_interaction_counters_task():
    """
    Self-heal denormalized counters (reaction counts, comment/reply counts)
    from the ledger. Safe to run at any time.
    """
    fixed = reconcile_interaction_counters()
    return f"✅ Counters reconciled: {fixed}"
