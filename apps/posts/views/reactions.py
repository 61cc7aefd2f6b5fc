# apps/posts/views/reactions.py
import logging

from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.core.api_exceptions import ValidationError
from apps.posts.serializers.reactions import ReactionEntrySerializer, ReactionWriteSerializer
from apps.posts.services import reactions as ledger
from apps.posts.targets import resolve_target

logger = logging.getLogger(__name__)


# REACTIONS Viewset --------------------------------------------------------------------------
class ReactionViewSet(viewsets.ViewSet):
    """
    Mounted twice, once per target kind:
    POST   /posts/<id>/reactions/                   set (toggle / switch)
    DELETE /posts/<id>/reactions/                   clear
    GET    /posts/<id>/reactions/?type=like         grouped list
    and the same three under /posts/comments/<commentId>/reactions/.

    The route fixes the target kind; an explicit targetType that
    disagrees with the route is rejected.
    """
    permission_classes = [IsAuthenticated]
    target_type = None

    def _target(self, supplied):
        if supplied and supplied != self.target_type:
            raise ValidationError(
                f"targetType '{supplied}' does not match this endpoint ('{self.target_type}')"
            )
        return resolve_target(self.target_type)

    def _payload(self, outcome, target, target_id):
        return {
            "message": outcome.message,
            "userReaction": outcome.user_reaction,
            "reactionCounts": outcome.counts,
            "targetType": target.kind,
            "targetId": target_id,
        }

    def create(self, request, target_id=None):
        serializer = ReactionWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        target = self._target(serializer.validated_data.get("targetType"))

        outcome = ledger.set_reaction(
            request.user, target, target_id, serializer.validated_data.get("type")
        )
        code = status.HTTP_201_CREATED if outcome.created else status.HTTP_200_OK
        return Response(self._payload(outcome, target, target_id), status=code)

    def destroy(self, request, target_id=None):
        target = self._target(request.data.get("targetType") or request.query_params.get("targetType"))
        outcome = ledger.clear_reaction(request.user, target, target_id)
        return Response(self._payload(outcome, target, target_id), status=status.HTTP_200_OK)

    def list(self, request, target_id=None):
        target = self._target(request.query_params.get("targetType"))
        grouped, counts = ledger.list_reactions(target, target_id, request.query_params.get("type"))

        reactions_by_type = {
            rtype: ReactionEntrySerializer(rows, many=True, context={"request": request}).data
            for rtype, rows in grouped.items()
        }
        return Response(
            {
                "targetId": target_id,
                "targetType": target.kind,
                "reactionCounts": counts,
                "reactionsByType": reactions_by_type,
                "totalReactions": sum(len(rows) for rows in grouped.values()),
            },
            status=status.HTTP_200_OK,
        )
