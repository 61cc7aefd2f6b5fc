# apps/posts/services/comments.py
"""
Comment/Reply tree: comments on posts with exactly one level of replies.
Counters on the post (top-level) and on the parent (replies) follow every mutation.
"""
import logging

from django.db import transaction

from apps.core.api_exceptions import AuthorizationError, NotFoundError, ValidationError
from apps.posts.constants import TARGET_COMMENT
from apps.posts.models import Comment, Post
from apps.posts.services.counters import on_comment_created, on_comment_removed
from apps.posts.services.reactions import purge_reactions
from common.media.image_store import destroy_image, replace_image, upload_image

logger = logging.getLogger(__name__)


def _clean_text(value) -> str:
    return (value or "").strip()


def get_comment(comment_id) -> Comment:
    try:
        return Comment.objects.select_related("owner").get(pk=comment_id)
    except (Comment.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("Comment not found")


def _check_owner(comment: Comment, user, verb: str):
    if comment.owner_id != getattr(user, "id", None):
        raise AuthorizationError(f"You can only {verb} your own comments")


# ------------------------------------------------------------
# CREATE
# ------------------------------------------------------------
def create_comment(user, post_id, text=None, image=None, parent_id=None) -> Comment:
    text = _clean_text(text)
    if not text and not image:
        raise ValidationError("Comment must contain text or image")

    if not Post.objects.filter(pk=post_id).exists():
        raise NotFoundError("Post not found")

    parent = None
    if parent_id:
        try:
            parent = Comment.objects.only("id", "post_id", "parent_id").get(pk=parent_id)
        except (Comment.DoesNotExist, ValueError, TypeError):
            raise NotFoundError("Parent comment not found")
        if parent.post_id != int(post_id):
            raise ValidationError("Parent comment does not belong to this post")
        if parent.parent_id is not None:
            raise ValidationError("Reply nesting is limited to one level.")

    image_url = upload_image(image, folder="comments") if image else None

    with transaction.atomic():
        comment = Comment.objects.create(
            owner=user,
            post_id=post_id,
            parent=parent,
            text=text,
            image=image_url,
        )
        on_comment_created(comment)

    logger.info(f"[COMMENTS] user={user.id} created comment={comment.id} post={post_id} parent={parent_id}")
    return get_comment(comment.pk)


# ------------------------------------------------------------
# UPDATE
# ------------------------------------------------------------
def update_comment(user, comment_id, text=None, image=None) -> Comment:
    comment = get_comment(comment_id)
    _check_owner(comment, user, "edit")

    new_text = comment.text if text is None else _clean_text(text)
    new_image = comment.image
    if image is not None:
        new_image = replace_image(comment.image, image, folder="comments")

    if not new_text and not new_image:
        raise ValidationError("Comment must contain text or image")

    comment.text = new_text
    comment.image = new_image
    comment.save(update_fields=["text", "image", "updated_at"])
    return comment


# ------------------------------------------------------------
# DELETE (cascade)
# ------------------------------------------------------------
def delete_comment(comment_id, user) -> dict:
    """
    Owner only. Removes replies and every reaction on the comment and its
    replies, decrements counters from the comment's own post/parent refs,
    then removes the comment itself.
    """
    comment = get_comment(comment_id)
    _check_owner(comment, user, "delete")

    post_id, parent_id = comment.post_id, comment.parent_id
    replies = list(Comment.objects.filter(parent_id=comment.pk).values_list("id", "image"))
    reply_ids = [rid for rid, _ in replies]
    images = [comment.image] + [img for _, img in replies]

    with transaction.atomic():
        reactions_removed = purge_reactions(TARGET_COMMENT, [comment.pk] + reply_ids)
        Comment.objects.filter(pk__in=reply_ids).delete()
        on_comment_removed(post_id, parent_id)
        comment.delete()

    for url in images:
        destroy_image(url)

    logger.info(
        f"[COMMENTS] user={user.id} deleted comment={comment_id} "
        f"replies={len(reply_ids)} reactions={reactions_removed}"
    )
    return {"deletedReplies": len(reply_ids), "deletedReactions": reactions_removed}


# ------------------------------------------------------------
# LIST
# ------------------------------------------------------------
def top_level_comments(post_id):
    """Newest first."""
    if not Post.objects.filter(pk=post_id).exists():
        raise NotFoundError("Post not found")
    return (
        Comment.objects.filter(post_id=post_id, parent__isnull=True)
        .select_related("owner")
        .order_by("-created_at", "-id")
    )


def replies_of(comment_id):
    """Oldest first, chronological reading order."""
    if not Comment.objects.filter(pk=comment_id).exists():
        raise NotFoundError("Comment not found")
    return (
        Comment.objects.filter(parent_id=comment_id)
        .select_related("owner")
        .order_by("created_at", "id")
    )
