# apps/posts/serializers/reactions.py

from rest_framework import serializers

from apps.accounts.serializers import SimpleCustomUserSerializer
from apps.posts.models import Reaction


class ReactionWriteSerializer(serializers.Serializer):
    # enum checks live in the ledger so HTTP and internal callers share one message
    type = serializers.CharField(required=False, allow_blank=True)
    targetType = serializers.CharField(required=False, allow_blank=True)


class ReactionEntrySerializer(serializers.ModelSerializer):
    """Entry inside a grouped reaction list."""
    user = SimpleCustomUserSerializer(read_only=True)
    reactedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Reaction
        fields = ["user", "reactedAt"]
