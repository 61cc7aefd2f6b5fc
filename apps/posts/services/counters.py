# apps/posts/services/counters.py
"""
Counter Projector.

- reaction_counts: always a full recompute from the Reaction ledger.
- comment_count / reply_count: atomic increments at create/delete time.
"""
import logging

from django.db import DatabaseError
from django.db.models import Count, F

from apps.posts.constants import REACTION_TYPES, TARGET_COMMENT, TARGET_POST, empty_reaction_counts
from apps.posts.models import Comment, Post, Reaction
from apps.posts.targets import ReactionTarget

logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------
def _safe_inc(model_cls, pk, field: str, by: int = 1):
    # Atomic DB-side increment
    model_cls.objects.filter(pk=pk).update(**{field: F(field) + int(by)})


def _safe_dec_non_negative(model_cls, pk, field: str, by: int = 1):
    """
    Atomic decrement first, then clamp in a second query.
    Counters never go below zero even if a delete is replayed.
    """
    model_cls.objects.filter(pk=pk).update(**{field: F(field) - int(by)})
    model_cls.objects.filter(pk=pk, **{f"{field}__lt": 0}).update(**{field: 0})


# ============================================================
# REACTIONS
# ============================================================
def tally_reactions(target_type: str, target_id) -> dict:
    """Group the ledger rows for one target by type and sum them to a total."""
    counts = empty_reaction_counts()
    rows = (
        Reaction.objects.filter(target_type=target_type, target_id=target_id)
        .values('reaction_type')
        .annotate(count=Count('id'))
    )
    for row in rows:
        rtype = row['reaction_type']
        if rtype in REACTION_TYPES:
            counts[rtype] = row['count']
    counts['total'] = sum(counts[rtype] for rtype in REACTION_TYPES)
    return counts


def recompute_reaction_counts(target: ReactionTarget, target_id) -> dict:
    """
    Overwrite reaction_counts on the target with the ledger tally.
    Idempotent. A failed write is logged and the tally is still returned;
    the stored counts catch up on the next recompute.
    """
    counts = tally_reactions(target.kind, target_id)
    try:
        target.model.objects.filter(pk=target_id).update(reaction_counts=counts)
    except DatabaseError as e:
        logger.error(f"[COUNTERS] recompute write failed for {target.kind}:{target_id}: {e}", exc_info=True)
    return counts


# ============================================================
# COMMENTS
# ============================================================
def on_comment_created(comment: Comment):
    if comment.parent_id:
        _safe_inc(Comment, comment.parent_id, "reply_count", 1)
    else:
        _safe_inc(Post, comment.post_id, "comment_count", 1)


def on_comment_removed(post_id, parent_id):
    """Uses the removed comment's recorded post/parent references."""
    if parent_id:
        _safe_dec_non_negative(Comment, parent_id, "reply_count", 1)
    else:
        _safe_dec_non_negative(Post, post_id, "comment_count", 1)


# ============================================================
# RECONCILE (self-healing)
# ============================================================
def reconcile_interaction_counters() -> dict:
    """
    Re-derive every denormalized counter from the source rows.
    Returns how many rows were corrected per counter.
    """
    fixed = {"post_reactions": 0, "comment_reactions": 0, "comment_count": 0, "reply_count": 0}

    top_level = {
        row['post_id']: row['n']
        for row in Comment.objects.filter(parent__isnull=True).values('post_id').annotate(n=Count('id'))
    }
    replies = {
        row['parent_id']: row['n']
        for row in Comment.objects.filter(parent__isnull=False).values('parent_id').annotate(n=Count('id'))
    }

    for post in Post.objects.only('id', 'reaction_counts', 'comment_count').iterator():
        counts = tally_reactions(TARGET_POST, post.pk)
        if post.reaction_counts != counts:
            Post.objects.filter(pk=post.pk).update(reaction_counts=counts)
            fixed["post_reactions"] += 1
        expected = top_level.get(post.pk, 0)
        if post.comment_count != expected:
            Post.objects.filter(pk=post.pk).update(comment_count=expected)
            fixed["comment_count"] += 1

    for comment in Comment.objects.only('id', 'reaction_counts', 'reply_count').iterator():
        counts = tally_reactions(TARGET_COMMENT, comment.pk)
        if comment.reaction_counts != counts:
            Comment.objects.filter(pk=comment.pk).update(reaction_counts=counts)
            fixed["comment_reactions"] += 1
        expected = replies.get(comment.pk, 0)
        if comment.reply_count != expected:
            Comment.objects.filter(pk=comment.pk).update(reply_count=expected)
            fixed["reply_count"] += 1

    logger.info(f"[COUNTERS] reconcile finished: {fixed}")
    return fixed
