# apps/posts/services/reactions.py
"""
Reaction Ledger: one row per (user, target), mutated in place on switch.
Every mutation finishes with a full counter recompute on the target.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from django.db import IntegrityError, transaction

from apps.core.api_exceptions import NotFoundError, ValidationError
from apps.posts.constants import REACTION_TYPES
from apps.posts.models import Reaction
from apps.posts.services.counters import recompute_reaction_counts
from apps.posts.targets import ReactionTarget

logger = logging.getLogger(__name__)

ADDED = "added"
UPDATED = "updated"
REMOVED = "removed"

_MESSAGES = {
    ADDED: "Reaction added",
    UPDATED: "Reaction updated",
    REMOVED: "Reaction removed",
}


@dataclass
class ReactionOutcome:
    action: str
    user_reaction: Optional[str]
    counts: dict

    @property
    def created(self) -> bool:
        return self.action == ADDED

    @property
    def message(self) -> str:
        return _MESSAGES[self.action]


def validate_reaction_type(value, *, required: bool = True) -> Optional[str]:
    if not value:
        if required:
            raise ValidationError("Reaction type is required")
        return None
    if value not in REACTION_TYPES:
        raise ValidationError(
            f"Invalid reaction type. Must be one of: {', '.join(REACTION_TYPES)}"
        )
    return value


def _ledger(user_id, target: ReactionTarget, target_id):
    return Reaction.objects.filter(user_id=user_id, target_type=target.kind, target_id=target_id)


# ------------------------------------------------------------
# SET (toggle / switch)
# ------------------------------------------------------------
def set_reaction(user, target: ReactionTarget, target_id, reaction_type) -> ReactionOutcome:
    """
    - no row         -> insert
    - same type      -> delete (toggle off)
    - different type -> update type in place
    """
    reaction_type = validate_reaction_type(reaction_type)
    target.get(target_id)

    existing = _ledger(user.id, target, target_id).first()
    if existing is None:
        try:
            with transaction.atomic():
                Reaction.objects.create(
                    user=user,
                    target_type=target.kind,
                    target_id=target_id,
                    reaction_type=reaction_type,
                )
            action, state = ADDED, reaction_type
        except IntegrityError:
            # A concurrent request inserted the row first; apply this call on top of it
            existing = _ledger(user.id, target, target_id).first()
            if existing is None:
                raise
            action, state = _apply_to_existing(existing, reaction_type)
    else:
        action, state = _apply_to_existing(existing, reaction_type)

    counts = recompute_reaction_counts(target, target_id)
    logger.info(f"[REACTIONS] user={user.id} {action} {reaction_type} on {target.kind}:{target_id}")
    return ReactionOutcome(action=action, user_reaction=state, counts=counts)


def _apply_to_existing(existing: Reaction, reaction_type: str):
    if existing.reaction_type == reaction_type:
        existing.delete()
        return REMOVED, None

    existing.reaction_type = reaction_type
    existing.save(update_fields=["reaction_type", "updated_at"])
    return UPDATED, reaction_type


# ------------------------------------------------------------
# CLEAR
# ------------------------------------------------------------
def clear_reaction(user, target: ReactionTarget, target_id) -> ReactionOutcome:
    target.get(target_id)

    deleted, _ = _ledger(user.id, target, target_id).delete()
    if not deleted:
        raise NotFoundError("Reaction not found")

    counts = recompute_reaction_counts(target, target_id)
    return ReactionOutcome(action=REMOVED, user_reaction=None, counts=counts)


# ------------------------------------------------------------
# LIST
# ------------------------------------------------------------
def list_reactions(target: ReactionTarget, target_id, filter_type=None):
    """
    Returns (grouped, counts):
      grouped -> {reaction_type: [Reaction, ...]} newest first, users preloaded
      counts  -> the target's current reaction_counts
    """
    filter_type = validate_reaction_type(filter_type, required=False)
    obj = target.get(target_id)

    qs = (
        Reaction.objects.filter(target_type=target.kind, target_id=target_id)
        .select_related("user")
        .order_by("-updated_at", "-id")
    )
    if filter_type:
        qs = qs.filter(reaction_type=filter_type)

    grouped: Dict[str, List[Reaction]] = {rtype: [] for rtype in REACTION_TYPES}
    for reaction in qs:
        grouped[reaction.reaction_type].append(reaction)

    return grouped, obj.reaction_counts


def user_reactions_for(user, target_kind: str, target_ids: Iterable) -> Dict[int, str]:
    """One ledger query for a page of targets -> {target_id: reaction_type}."""
    ids = [pk for pk in target_ids if pk is not None]
    if not ids or not getattr(user, "is_authenticated", False):
        return {}
    rows = Reaction.objects.filter(
        user_id=user.id, target_type=target_kind, target_id__in=ids
    ).values_list("target_id", "reaction_type")
    return {target_id: rtype for target_id, rtype in rows}


def purge_reactions(target_kind: str, target_ids: Iterable) -> int:
    ids = list(target_ids)
    if not ids:
        return 0
    deleted, _ = Reaction.objects.filter(target_type=target_kind, target_id__in=ids).delete()
    return deleted
