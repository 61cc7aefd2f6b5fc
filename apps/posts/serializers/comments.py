# apps/posts/serializers/comments.py

from rest_framework import serializers

from apps.accounts.serializers import SimpleCustomUserSerializer
from apps.posts.models.comment import Comment
from apps.posts.serializers.common import UserReactionMixin


class CommentReadSerializer(UserReactionMixin, serializers.ModelSerializer):
    """
    Comment or reply with owner profile and counters.
    `userReaction` comes from the batch map in context["user_reactions"].
    """
    user = SimpleCustomUserSerializer(source="owner", read_only=True)
    postId = serializers.IntegerField(source="post_id", read_only=True)
    parentCommentId = serializers.IntegerField(source="parent_id", read_only=True, allow_null=True)
    reactionCounts = serializers.JSONField(source="reaction_counts", read_only=True)
    replyCount = serializers.IntegerField(source="reply_count", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Comment
        fields = [
            "id", "postId", "parentCommentId", "user", "text", "image",
            "reactionCounts", "replyCount", "userReaction", "createdAt", "updatedAt",
        ]


class CommentWriteSerializer(serializers.Serializer):
    text = serializers.CharField(required=False, allow_blank=True, max_length=5000)
    image = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    parentCommentId = serializers.IntegerField(required=False, allow_null=True, min_value=1)
