# apps/groups/views.py
import logging

from django.conf import settings
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.accounts.serializers import SimpleCustomUserSerializer
from apps.core.pagination import ConfigurablePagination
from services.group_fanout import get_fanout
from . import services as group_service
from .serializers import GroupMessageSerializer, GroupSerializer, GroupSidebarSerializer

logger = logging.getLogger(__name__)


# GROUPS Viewset -------------------------------------------------------------------------
class GroupViewSet(viewsets.ViewSet):
    """
    POST   /group/gcreate/              create group
    GET    /group/                      sidebar (groups + lastMessage)
    GET    /group/<id>/messages/        history, latest page oldest-first
    POST   /group/<id>/send/            durable send
    PUT    /group/<id>/addUser/         add member
    PUT    /group/<id>/rename/          rename (creator only)
    DELETE /group/<id>/leave/           leave
    DELETE /group/<id>/removeUser/      remove member (creator only)
    """
    permission_classes = [IsAuthenticated]
    fanout = None

    def get_fanout(self):
        return self.fanout or get_fanout()

    def _group_data(self, request, group):
        return GroupSerializer(group, context={"request": request}).data

    # Create ---------------------------------------
    def create(self, request):
        group, member_ids = group_service.create_group(
            request.user,
            request.data.get("name"),
            request.data.get("members"),
        )
        data = self._group_data(request, group)

        notified = self.get_fanout().notify_group_members(
            member_ids,
            "groupCreated",
            {**data, "message": f'You have been added to the group "{group.name}"'},
        )
        logger.info(f"[GROUPS] groupCreated delivered to {notified} members")

        return Response(
            {"success": True, "message": "Group created successfully", "group": data},
            status=status.HTTP_201_CREATED,
        )

    # Sidebar --------------------------------------
    def list(self, request):
        groups = group_service.groups_for_user(request.user)
        serializer = GroupSidebarSerializer(groups, many=True, context={"request": request})
        return Response(serializer.data, status=status.HTTP_200_OK)

    # Messages -------------------------------------
    def messages(self, request, group_id=None):
        queryset = group_service.message_history(group_id, request.user)
        paginator = ConfigurablePagination(
            page_size=settings.GROUP_MESSAGES_PAGE_SIZE,
            max_page_size=100,
            results_key="messages",
        )
        page = paginator.paginate_queryset(queryset, request)
        data = GroupMessageSerializer(list(reversed(page)), many=True, context={"request": request}).data
        return paginator.get_paginated_response(data)

    def send(self, request, group_id=None):
        message = group_service.send_message(
            request.user,
            group_id,
            text=request.data.get("text"),
            image=request.data.get("image"),
        )
        data = GroupMessageSerializer(message, context={"request": request}).data

        emitted = self.get_fanout().emit_to_group(message.group_id, "newGroupMessage", {**data, "optimistic": False})
        logger.debug(f"[GROUPS] newGroupMessage emitted={emitted}")

        return Response(data, status=status.HTTP_201_CREATED)

    # Membership -----------------------------------
    def add_user(self, request, group_id=None):
        group, user = group_service.add_member(request.user, group_id, request.data.get("userId"))
        data = self._group_data(request, group)
        user_data = SimpleCustomUserSerializer(user, context={"request": request}).data

        fanout = self.get_fanout()
        fanout.emit_to_group(group.id, "userAddedToGroup", {
            "groupId": group.id,
            "user": user_data,
            "group": data,
            "message": f"{user.full_name} has been added to the group",
        })
        fanout.notify_group_members([user.id], "groupCreated", {
            **data,
            "message": f'You have been added to the group "{group.name}"',
        })

        return Response(
            {"success": True, "message": "User added to group successfully", "group": data},
            status=status.HTTP_200_OK,
        )

    def rename(self, request, group_id=None):
        group, old_name = group_service.rename_group(request.user, group_id, request.data.get("name"))
        data = self._group_data(request, group)
        updated_by = request.user.full_name

        self.get_fanout().emit_to_group(group.id, "groupRenamed", {
            "groupId": group.id,
            "oldName": old_name,
            "newName": group.name,
            "updatedBy": updated_by,
            "group": data,
            "message": f'Group name changed from "{old_name}" to "{group.name}" by {updated_by}',
        })

        return Response(
            {
                "success": True,
                "message": "Group renamed successfully",
                "group": data,
                "oldName": old_name,
                "newName": group.name,
            },
            status=status.HTTP_200_OK,
        )

    def leave(self, request, group_id=None):
        group = group_service.leave_group(request.user, group_id)

        fanout = self.get_fanout()
        fanout.emit_to_group(group.id, "userLeftGroup", {
            "groupId": group.id,
            "userId": request.user.id,
            "message": f"{request.user.full_name} has left the group",
        })
        fanout.evict_user_from_group(group.id, request.user.id)

        return Response({"message": "You have left the group successfully."}, status=status.HTTP_200_OK)

    def remove_user(self, request, group_id=None):
        group, removed = group_service.remove_member(request.user, group_id, request.data.get("userId"))

        fanout = self.get_fanout()
        fanout.emit_to_group(group.id, "userRemovedFromGroup", {
            "groupId": group.id,
            "userId": removed.id,
            "message": f"{request.user.full_name} has removed {removed.full_name} from the group",
        })
        fanout.evict_user_from_group(group.id, removed.id)

        return Response({"message": "User has been removed from the group"}, status=status.HTTP_200_OK)
