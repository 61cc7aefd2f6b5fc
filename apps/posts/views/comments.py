# apps/posts/views/comments.py
import logging

from django.conf import settings
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.posts.constants import TARGET_COMMENT
from apps.posts.serializers.comments import CommentReadSerializer, CommentWriteSerializer
from apps.posts.services import comments as comment_service
from apps.posts.services.reactions import user_reactions_for
from apps.posts.views.common import paginate_with_user_reactions

logger = logging.getLogger(__name__)


class CommentViewSet(viewsets.ViewSet):
    """
    POST   /posts/<id>/comments/                  create comment or reply (parentCommentId)
    GET    /posts/<id>/comments/                  top-level comments, newest first
    GET    /posts/comments/<commentId>/replies/   replies, oldest first
    PUT    /posts/comments/<commentId>/           edit (owner only)
    DELETE /posts/comments/<commentId>/           delete with replies + reactions (owner only)
    """
    permission_classes = [IsAuthenticated]

    def _read(self, request, comment):
        reactions = user_reactions_for(request.user, TARGET_COMMENT, [comment.pk])
        return CommentReadSerializer(
            comment, context={"request": request, "user_reactions": reactions}
        ).data

    def create(self, request, post_id=None):
        serializer = CommentWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        comment = comment_service.create_comment(
            request.user,
            post_id,
            text=data.get("text"),
            image=data.get("image"),
            parent_id=data.get("parentCommentId"),
        )
        return Response(self._read(request, comment), status=status.HTTP_201_CREATED)

    def list(self, request, post_id=None):
        return paginate_with_user_reactions(
            request,
            comment_service.top_level_comments(post_id),
            CommentReadSerializer,
            results_key="comments",
            target_kind=TARGET_COMMENT,
            page_size=settings.COMMENTS_PAGE_SIZE,
        )

    def replies(self, request, comment_id=None):
        return paginate_with_user_reactions(
            request,
            comment_service.replies_of(comment_id),
            CommentReadSerializer,
            results_key="replies",
            target_kind=TARGET_COMMENT,
            page_size=settings.COMMENTS_PAGE_SIZE,
        )

    def update(self, request, comment_id=None):
        serializer = CommentWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        comment = comment_service.update_comment(
            request.user,
            comment_id,
            text=serializer.validated_data.get("text"),
            image=serializer.validated_data.get("image"),
        )
        return Response(self._read(request, comment), status=status.HTTP_200_OK)

    def destroy(self, request, comment_id=None):
        summary = comment_service.delete_comment(comment_id, request.user)
        return Response({"message": "Comment deleted successfully", **summary}, status=status.HTTP_200_OK)
