from django.db import models
from django.utils import timezone
from django.contrib.auth import get_user_model

from apps.posts.models.mixins import ReactionCountsMixin
from apps.posts.models.post import Post

CustomUser = get_user_model()


# Comment Models ------------------------------------------------------------------------------------
class Comment(ReactionCountsMixin):
    id = models.BigAutoField(primary_key=True)
    owner = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='user_comments', verbose_name='Owner')
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name='comments', verbose_name='Post')
    text = models.TextField(blank=True, default='', verbose_name='Text')
    image = models.CharField(max_length=500, blank=True, null=True, verbose_name='Image')

    # parent (single-level reply)
    parent = models.ForeignKey('self', on_delete=models.CASCADE, blank=True, null=True,
                               related_name='replies', verbose_name='Parent Comment')
    reply_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(default=timezone.now, verbose_name='Created At')
    updated_at = models.DateTimeField(auto_now=True, verbose_name='Updated At')

    class Meta:
        verbose_name = "Comment"
        verbose_name_plural = "Comments"
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['post', 'parent', '-created_at'], name='posts_comme_post_id_4b1f0a_idx'),
            models.Index(fields=['parent', 'created_at'], name='posts_comme_parent__9d2e7c_idx'),
        ]

    def __str__(self):
        return f"Comment {self.pk} by {self.owner_id}"
