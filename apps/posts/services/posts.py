# apps/posts/services/posts.py
import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from apps.core.api_exceptions import AuthorizationError, NotFoundError, ValidationError
from apps.posts.constants import TARGET_COMMENT, TARGET_POST
from apps.posts.models import Comment, Post
from apps.posts.services.reactions import purge_reactions
from common.media.image_store import destroy_image, replace_image, upload_image

logger = logging.getLogger(__name__)
CustomUser = get_user_model()


def get_post(post_id) -> Post:
    try:
        return Post.objects.select_related("owner").get(pk=post_id)
    except (Post.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("Post not found")


def create_post(user, text=None, image=None) -> Post:
    text = (text or "").strip()
    if not text and not image:
        raise ValidationError("Post must contain text or image")

    image_url = upload_image(image, folder="posts") if image else None
    post = Post.objects.create(owner=user, text=text, image=image_url)
    logger.info(f"[POSTS] user={user.id} created post={post.id}")
    return get_post(post.pk)


def update_post(user, post_id, text=None, image=None) -> Post:
    post = get_post(post_id)
    if post.owner_id != user.id:
        raise AuthorizationError("You can only edit your own posts")

    new_text = post.text if text is None else text.strip()
    new_image = post.image
    if image is not None:
        new_image = replace_image(post.image, image, folder="posts")

    if not new_text and not new_image:
        raise ValidationError("Post must contain text or image")

    post.text = new_text
    post.image = new_image
    post.save(update_fields=["text", "image", "updated_at"])
    return post


def delete_post(user, post_id) -> dict:
    """
    Owner only. Cascades to every comment and reply on the post and to all
    reactions on the post and on those comments.
    """
    post = get_post(post_id)
    if post.owner_id != user.id:
        raise AuthorizationError("You can only delete your own posts")

    comments = list(Comment.objects.filter(post_id=post.pk).values_list("id", "image"))
    comment_ids = [cid for cid, _ in comments]
    images = [post.image] + [img for _, img in comments]

    with transaction.atomic():
        reactions_removed = purge_reactions(TARGET_COMMENT, comment_ids)
        reactions_removed += purge_reactions(TARGET_POST, [post.pk])
        # replies first so the self-referencing FK never blocks the delete
        Comment.objects.filter(post_id=post.pk, parent__isnull=False).delete()
        Comment.objects.filter(post_id=post.pk).delete()
        post.delete()

    for url in images:
        destroy_image(url)

    logger.info(
        f"[POSTS] user={user.id} deleted post={post_id} "
        f"comments={len(comment_ids)} reactions={reactions_removed}"
    )
    return {"deletedComments": len(comment_ids), "deletedReactions": reactions_removed}


def feed():
    return Post.objects.select_related("owner").order_by("-created_at", "-id")


def posts_of_user(user_id):
    if not CustomUser.objects.filter(pk=user_id).exists():
        raise NotFoundError("User not found")
    return feed().filter(owner_id=user_id)
