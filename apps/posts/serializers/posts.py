# apps/posts/serializers/posts.py

from rest_framework import serializers

from apps.accounts.serializers import SimpleCustomUserSerializer
from apps.posts.models.post import Post
from apps.posts.serializers.common import UserReactionMixin


class PostReadSerializer(UserReactionMixin, serializers.ModelSerializer):
    user = SimpleCustomUserSerializer(source="owner", read_only=True)
    reactionCounts = serializers.JSONField(source="reaction_counts", read_only=True)
    commentCount = serializers.IntegerField(source="comment_count", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Post
        fields = [
            "id", "user", "text", "image", "reactionCounts", "commentCount",
            "userReaction", "createdAt", "updatedAt",
        ]


class PostWriteSerializer(serializers.Serializer):
    text = serializers.CharField(required=False, allow_blank=True, max_length=10000)
    image = serializers.CharField(required=False, allow_blank=True, allow_null=True)
