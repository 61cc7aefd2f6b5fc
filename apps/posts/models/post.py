from django.db import models
from django.utils import timezone
from django.contrib.auth import get_user_model

from apps.posts.models.mixins import ReactionCountsMixin

CustomUser = get_user_model()


# Post Models ---------------------------------------------------------------------------------------
class Post(ReactionCountsMixin):
    id = models.BigAutoField(primary_key=True)
    owner = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='posts', verbose_name='Owner')
    text = models.TextField(blank=True, default='', verbose_name='Text')
    image = models.CharField(max_length=500, blank=True, null=True, verbose_name='Image')

    # top-level comments only
    comment_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(default=timezone.now, verbose_name='Created At')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Updated At')

    class Meta:
        verbose_name = "Post"
        verbose_name_plural = "Posts"
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['owner', '-created_at'], name='posts_post_owner_i_6c8c1e_idx'),
        ]

    def __str__(self):
        return f"Post {self.pk} by {self.owner_id}"
