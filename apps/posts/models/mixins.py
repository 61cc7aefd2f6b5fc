# apps/posts/models/mixins.py

from django.db import models

from apps.posts.constants import empty_reaction_counts


class ReactionCountsMixin(models.Model):
    """
    Denormalized per-type reaction tally, projected from the Reaction ledger.
    Example:
    {
        "love": 0,
        "like": 3,
        "funny": 1,
        "horror": 0,
        "total": 4
    }
    """

    reaction_counts = models.JSONField(default=empty_reaction_counts)

    class Meta:
        abstract = True
