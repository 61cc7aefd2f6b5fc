from django.urls import path

from apps.posts.constants import TARGET_COMMENT, TARGET_POST
from apps.posts.views.comments import CommentViewSet
from apps.posts.views.posts import PostViewSet
from apps.posts.views.reactions import ReactionViewSet


post_collection = PostViewSet.as_view({'get': 'feed', 'post': 'create'})
post_detail = PostViewSet.as_view({'get': 'retrieve', 'put': 'update', 'delete': 'destroy'})
post_by_user = PostViewSet.as_view({'get': 'by_user'})

comment_collection = CommentViewSet.as_view({'get': 'list', 'post': 'create'})
comment_detail = CommentViewSet.as_view({'put': 'update', 'delete': 'destroy'})
comment_replies = CommentViewSet.as_view({'get': 'replies'})

reaction_actions = {'get': 'list', 'post': 'create', 'delete': 'destroy'}
post_reactions = ReactionViewSet.as_view(reaction_actions, target_type=TARGET_POST)
comment_reactions = ReactionViewSet.as_view(reaction_actions, target_type=TARGET_COMMENT)


app_name = 'posts'

urlpatterns = [
    # Posts
    path('', post_collection, name='post-collection'),
    path('user/<int:user_id>/', post_by_user, name='post-by-user'),
    path('<int:post_id>/', post_detail, name='post-detail'),

    # Comments
    path('<int:post_id>/comments/', comment_collection, name='comment-collection'),
    path('comments/<int:comment_id>/', comment_detail, name='comment-detail'),
    path('comments/<int:comment_id>/replies/', comment_replies, name='comment-replies'),

    # Reactions
    path('<int:target_id>/reactions/', post_reactions, name='post-reactions'),
    path('comments/<int:target_id>/reactions/', comment_reactions, name='comment-reactions'),
]
