# apps/posts/views/posts.py
import logging

from django.conf import settings
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.posts.constants import TARGET_POST
from apps.posts.serializers.posts import PostReadSerializer, PostWriteSerializer
from apps.posts.services import posts as post_service
from apps.posts.services.reactions import user_reactions_for
from apps.posts.views.common import paginate_with_user_reactions

logger = logging.getLogger(__name__)


# POSTS Viewset --------------------------------------------------------------------------
class PostViewSet(viewsets.ViewSet):
    """
    POST   /posts/                 create
    GET    /posts/                 feed (newest first, paginated)
    GET    /posts/<id>/            single post
    PUT    /posts/<id>/            update (owner only)
    DELETE /posts/<id>/            delete with full cascade (owner only)
    GET    /posts/user/<userId>/   posts by one user
    """
    permission_classes = [IsAuthenticated]

    def _read(self, request, post):
        reactions = user_reactions_for(request.user, TARGET_POST, [post.pk])
        return PostReadSerializer(post, context={"request": request, "user_reactions": reactions}).data

    def create(self, request):
        serializer = PostWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        post = post_service.create_post(
            request.user,
            text=serializer.validated_data.get("text"),
            image=serializer.validated_data.get("image"),
        )
        return Response(self._read(request, post), status=status.HTTP_201_CREATED)

    def feed(self, request):
        return paginate_with_user_reactions(
            request,
            post_service.feed(),
            PostReadSerializer,
            results_key="posts",
            target_kind=TARGET_POST,
            page_size=settings.FEED_PAGE_SIZE,
        )

    def by_user(self, request, user_id=None):
        return paginate_with_user_reactions(
            request,
            post_service.posts_of_user(user_id),
            PostReadSerializer,
            results_key="posts",
            target_kind=TARGET_POST,
            page_size=settings.FEED_PAGE_SIZE,
        )

    def retrieve(self, request, post_id=None):
        post = post_service.get_post(post_id)
        return Response(self._read(request, post))

    def update(self, request, post_id=None):
        serializer = PostWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        post = post_service.update_post(
            request.user,
            post_id,
            text=serializer.validated_data.get("text"),
            image=serializer.validated_data.get("image"),
        )
        return Response(self._read(request, post), status=status.HTTP_200_OK)

    def destroy(self, request, post_id=None):
        summary = post_service.delete_post(request.user, post_id)
        return Response({"message": "Post deleted successfully", **summary}, status=status.HTTP_200_OK)
