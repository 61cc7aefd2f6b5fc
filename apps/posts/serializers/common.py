# apps/posts/serializers/common.py

from rest_framework import serializers


class UserReactionMixin(serializers.Serializer):
    """Adds `userReaction` looked up from a pre-fetched {target_id: type} map."""
    userReaction = serializers.SerializerMethodField()

    def get_userReaction(self, obj):
        return (self.context.get("user_reactions") or {}).get(obj.pk)
