# apps/groups/services.py
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction

from apps.core.api_exceptions import AuthorizationError, NotFoundError, ValidationError
from common.media.image_store import upload_image
from .models import Group, GroupMembership, GroupMessage

logger = logging.getLogger(__name__)
CustomUser = get_user_model()


# Lookups ----------------------------------------------------------------------
def get_group(group_id) -> Group:
    try:
        return Group.objects.select_related("created_by").get(pk=group_id)
    except (Group.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("Group not found")


def is_member(group_id, user_id) -> bool:
    if not group_id or not user_id:
        return False
    return GroupMembership.objects.filter(group_id=group_id, user_id=user_id).exists()


def require_member(group: Group, user) -> None:
    if not group.has_member(user.id):
        raise AuthorizationError("You are not a member of this group")


def _clean_name(name) -> str:
    name = (name or "").strip() if isinstance(name, str) else ""
    if not name:
        raise ValidationError("Group name is required")
    max_length = settings.GROUP_NAME_MAX_LENGTH
    if len(name) > max_length:
        raise ValidationError(f"Group name must be between 1 and {max_length} characters")
    return name


def _user_id(value) -> int:
    try:
        user_id = int(value)
    except (TypeError, ValueError):
        raise ValidationError("User ID is required")
    if user_id <= 0:
        raise ValidationError("User ID is required")
    return user_id


# Groups -----------------------------------------------------------------------
def create_group(creator, name, members):
    """
    Creator is always a member; duplicates are dropped and every id must
    resolve to an existing user. Returns (group, member_ids).
    """
    name = _clean_name(name)
    if not isinstance(members, (list, tuple)) or len(members) < 1:
        raise ValidationError("At least one member is required")

    try:
        requested = [int(m) for m in members]
    except (TypeError, ValueError):
        raise ValidationError("One or more users do not exist")

    member_ids = list(dict.fromkeys([creator.id] + requested))
    users = list(CustomUser.objects.filter(pk__in=member_ids, is_active=True))
    if len(users) != len(member_ids):
        raise ValidationError("One or more users do not exist")

    with transaction.atomic():
        group = Group.objects.create(name=name, created_by=creator)
        group.members.add(*users)

    logger.info(f"[GROUPS] user={creator.id} created group={group.id} members={member_ids}")
    return group, member_ids


def groups_for_user(user):
    """Sidebar listing, newest group first, each carrying its `last_message`."""
    groups = list(
        Group.objects.filter(memberships__user=user)
        .select_related("created_by")
        .prefetch_related("members")
        .order_by("-created_at", "-id")
        .distinct()
    )
    for group in groups:
        group.last_message = (
            group.messages.select_related("sender").order_by("-created_at", "-id").first()
        )
    return groups


def message_history(group_id, user):
    """Newest first for paging; views flip each page to oldest-first."""
    group = get_group(group_id)
    require_member(group, user)
    return group.messages.select_related("sender").order_by("-created_at", "-id")


def send_message(user, group_id, text=None, image=None) -> GroupMessage:
    text = (text or "").strip() if isinstance(text, str) else ""
    if not text and not image:
        raise ValidationError("Message must contain text or image")

    group = get_group(group_id)
    require_member(group, user)

    image_url = upload_image(image, folder="groups") if image else None
    message = GroupMessage.objects.create(group=group, sender=user, text=text, image=image_url)
    logger.info(f"[GROUPS] user={user.id} sent message={message.id} group={group.id}")
    return message


def add_member(requester, group_id, user_id):
    user_id = _user_id(user_id)

    group = get_group(group_id)
    require_member(group, requester)

    try:
        user = CustomUser.objects.get(pk=user_id, is_active=True)
    except CustomUser.DoesNotExist:
        raise NotFoundError("User to be added not found")

    if group.has_member(user.id):
        raise ValidationError("User is already a member of this group")

    group.members.add(user)
    group.save(update_fields=["updated_at"])
    logger.info(f"[GROUPS] user={requester.id} added user={user.id} to group={group.id}")
    return group, user


def rename_group(requester, group_id, name):
    """Creator only. Returns (group, old_name)."""
    new_name = _clean_name(name)
    group = get_group(group_id)

    if group.created_by_id != requester.id:
        raise AuthorizationError("Only the group creator can rename the group")
    if group.name == new_name:
        raise ValidationError("New name must be different from current name")

    old_name = group.name
    group.name = new_name
    group.save(update_fields=["name", "updated_at"])
    logger.info(f"[GROUPS] group={group.id} renamed '{old_name}' -> '{new_name}' by user={requester.id}")
    return group, old_name


def leave_group(user, group_id) -> Group:
    group = get_group(group_id)
    if not group.has_member(user.id):
        raise ValidationError("You are not a member of this group")

    group.members.remove(user)
    logger.info(f"[GROUPS] user={user.id} left group={group.id}")
    return group


def remove_member(requester, group_id, user_id):
    group = get_group(group_id)
    if group.created_by_id != requester.id:
        raise AuthorizationError("Only the group creator can remove members")

    user_id = _user_id(user_id)
    if user_id == requester.id:
        raise ValidationError("The group creator cannot be removed")

    membership = GroupMembership.objects.select_related("user").filter(group=group, user_id=user_id).first()
    if membership is None:
        raise ValidationError("User is not a member of this group")

    removed = membership.user
    membership.delete()
    logger.info(f"[GROUPS] user={requester.id} removed user={removed.id} from group={group.id}")
    return group, removed
