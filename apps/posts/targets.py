# apps/posts/targets.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Type

from django.db import models

from apps.core.api_exceptions import NotFoundError, ValidationError
from apps.posts.constants import TARGET_COMMENT, TARGET_POST, TARGET_TYPES
from apps.posts.models import Comment, Post


@dataclass(frozen=True)
class ReactionTarget:
    """
    Declarative contract for anything a Reaction can point at.
    Resolved once at the HTTP boundary; services never branch on the string.
    """
    kind: str                      # post / comment
    model: Type[models.Model]
    label: str                     # used in "<Label> not found"

    def get(self, target_id) -> models.Model:
        try:
            return self.model.objects.get(pk=target_id)
        except (self.model.DoesNotExist, ValueError, TypeError):
            raise NotFoundError(f"{self.label} not found")


# ------------------------------------------------------------------
# Registry
# ------------------------------------------------------------------

_TARGETS: Dict[str, ReactionTarget] = {
    TARGET_POST: ReactionTarget(kind=TARGET_POST, model=Post, label="Post"),
    TARGET_COMMENT: ReactionTarget(kind=TARGET_COMMENT, model=Comment, label="Comment"),
}


def resolve_target(kind) -> ReactionTarget:
    target = _TARGETS.get(kind)
    if target is None:
        raise ValidationError(
            f"Invalid targetType. Must be one of: {', '.join(TARGET_TYPES)}"
        )
    return target
