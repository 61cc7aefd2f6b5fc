from rest_framework import serializers

from apps.accounts.serializers import SimpleCustomUserSerializer
from .models import Group, GroupMessage


# GROUP MESSAGE Serializer ---------------------------------------
class GroupMessageSerializer(serializers.ModelSerializer):
    groupId = serializers.IntegerField(source='group_id', read_only=True)
    senderId = serializers.IntegerField(source='sender_id', read_only=True)
    sender = SimpleCustomUserSerializer(read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = GroupMessage
        fields = ['id', 'groupId', 'senderId', 'sender', 'text', 'image', 'createdAt']
        read_only_fields = fields


# GROUP Serializer -----------------------------------------------
class GroupSerializer(serializers.ModelSerializer):
    members = SimpleCustomUserSerializer(many=True, read_only=True)
    createdBy = SimpleCustomUserSerializer(source='created_by', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Group
        fields = ['id', 'name', 'members', 'createdBy', 'createdAt', 'updatedAt']
        read_only_fields = fields


class GroupSidebarSerializer(GroupSerializer):
    lastMessage = serializers.SerializerMethodField()

    class Meta(GroupSerializer.Meta):
        fields = GroupSerializer.Meta.fields + ['lastMessage']
        read_only_fields = fields

    def get_lastMessage(self, obj):
        message = getattr(obj, 'last_message', None)
        if message is None:
            return None
        return GroupMessageSerializer(message, context=self.context).data
