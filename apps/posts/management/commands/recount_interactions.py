# apps/posts/management/commands/recount_interactions.py
from django.core.management.base import BaseCommand

from apps.posts.services.counters import reconcile_interaction_counters


class Command(BaseCommand):
    help = "Recompute reaction, comment and reply counters on every post and comment from the ledger"

    def handle(self, *args, **kwargs):
        fixed = reconcile_interaction_counters()
        for name, count in fixed.items():
            self.stdout.write(f"{name}: {count} corrected")
        self.stdout.write(self.style.SUCCESS("✅ Interaction counters reconciled."))


# python manage.py recount_interactions
