from django.db import models
from django.utils import timezone
from django.contrib.auth import get_user_model

from apps.posts.constants import REACTION_TYPE_CHOICES, TARGET_TYPE_CHOICES

CustomUser = get_user_model()


# Reaction Models ---------------------------------------------------------------------------------
class Reaction(models.Model):
    """One row per (user, target). Switching type updates the row in place."""
    id = models.BigAutoField(primary_key=True)
    user = models.ForeignKey(
        CustomUser,
        on_delete=models.CASCADE,
        related_name='user_reactions',
        verbose_name='User'
    )
    target_type = models.CharField(max_length=10, choices=TARGET_TYPE_CHOICES, verbose_name='Target Type')
    target_id = models.PositiveBigIntegerField(verbose_name='Target ID')
    reaction_type = models.CharField(
        max_length=20,
        choices=REACTION_TYPE_CHOICES,
        verbose_name='Reaction Type'
    )

    created_at = models.DateTimeField(default=timezone.now, verbose_name='Created At')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Updated At')

    def __str__(self):
        return f'{self.user_id} reacted with {self.reaction_type} on {self.target_type}:{self.target_id}'

    class Meta:
        verbose_name = "Reaction"
        verbose_name_plural = "Reactions"
        unique_together = ('user', 'target_type', 'target_id')
        indexes = [
            models.Index(fields=['target_type', 'target_id'], name='posts_react_target__1a7f3b_idx'),
            models.Index(fields=['target_type', 'target_id', 'reaction_type'], name='posts_react_target__e52c90_idx'),
        ]
