from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from apps.core.api_exceptions import AuthorizationError, NotFoundError, ValidationError
from apps.posts.constants import TARGET_COMMENT
from apps.posts.models import Comment, Post, Reaction
from apps.posts.services import comments as comment_service
from apps.posts.services import reactions as ledger
from apps.posts.targets import resolve_target

CustomUser = get_user_model()


class CommentTreeTests(TestCase):
    def setUp(self):
        self.alice = CustomUser.objects.create_user(email='alice@example.com', full_name='Alice', password='password123')
        self.bob = CustomUser.objects.create_user(email='bob@example.com', full_name='Bob', password='password123')
        self.post = Post.objects.create(owner=self.alice, text='hello')

    def test_top_level_comment_increments_post_count(self):
        comment_service.create_comment(self.bob, self.post.id, text='first')
        self.post.refresh_from_db()
        self.assertEqual(self.post.comment_count, 1)

    def test_reply_increments_parent_not_post(self):
        parent = comment_service.create_comment(self.bob, self.post.id, text='first')
        comment_service.create_comment(self.alice, self.post.id, text='reply', parent_id=parent.id)

        parent.refresh_from_db()
        self.post.refresh_from_db()
        self.assertEqual(parent.reply_count, 1)
        self.assertEqual(self.post.comment_count, 1)

    def test_reply_to_reply_is_rejected(self):
        parent = comment_service.create_comment(self.bob, self.post.id, text='first')
        reply = comment_service.create_comment(self.alice, self.post.id, text='reply', parent_id=parent.id)
        with self.assertRaises(ValidationError):
            comment_service.create_comment(self.bob, self.post.id, text='deep', parent_id=reply.id)

    def test_parent_from_another_post_is_rejected(self):
        other = Post.objects.create(owner=self.alice, text='other')
        parent = comment_service.create_comment(self.bob, other.id, text='elsewhere')
        with self.assertRaises(ValidationError):
            comment_service.create_comment(self.bob, self.post.id, text='reply', parent_id=parent.id)

    def test_empty_comment_and_missing_post(self):
        with self.assertRaises(ValidationError):
            comment_service.create_comment(self.bob, self.post.id, text='   ')
        with self.assertRaises(NotFoundError):
            comment_service.create_comment(self.bob, 99999, text='hi')

    def test_delete_comment_cascades_replies_and_reactions(self):
        """C1 on P gets reply C2; deleting C1 removes C2 and both reaction sets."""
        c1 = comment_service.create_comment(self.bob, self.post.id, text='C1')
        c2 = comment_service.create_comment(self.alice, self.post.id, text='C2', parent_id=c1.id)
        target = resolve_target(TARGET_COMMENT)
        ledger.set_reaction(self.alice, target, c1.id, 'love')
        ledger.set_reaction(self.bob, target, c2.id, 'like')

        summary = comment_service.delete_comment(c1.id, self.bob)

        self.assertEqual(summary, {'deletedReplies': 1, 'deletedReactions': 2})
        self.assertFalse(Comment.objects.filter(pk__in=[c1.id, c2.id]).exists())
        self.assertFalse(Reaction.objects.filter(target_type=TARGET_COMMENT).exists())
        self.post.refresh_from_db()
        self.assertEqual(self.post.comment_count, 0)

    def test_delete_reply_decrements_parent(self):
        c1 = comment_service.create_comment(self.bob, self.post.id, text='C1')
        c2 = comment_service.create_comment(self.alice, self.post.id, text='C2', parent_id=c1.id)

        comment_service.delete_comment(c2.id, self.alice)

        c1.refresh_from_db()
        self.post.refresh_from_db()
        self.assertEqual(c1.reply_count, 0)
        self.assertEqual(self.post.comment_count, 1)

    def test_only_owner_edits_or_deletes(self):
        comment = comment_service.create_comment(self.bob, self.post.id, text='mine')
        with self.assertRaises(AuthorizationError):
            comment_service.update_comment(self.alice, comment.id, text='hijack')
        with self.assertRaises(AuthorizationError):
            comment_service.delete_comment(comment.id, self.alice)

        updated = comment_service.update_comment(self.bob, comment.id, text='edited')
        self.assertEqual(updated.text, 'edited')


class CommentAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.alice = CustomUser.objects.create_user(email='alice@example.com', full_name='Alice', password='password123')
        self.client.force_authenticate(user=self.alice)
        self.post = Post.objects.create(owner=self.alice, text='hello')

    def test_create_list_and_replies(self):
        url = reverse('posts:comment-collection', kwargs={'post_id': self.post.id})
        first = self.client.post(url, {'text': 'one'}, format='json')
        second = self.client.post(url, {'text': 'two'}, format='json')
        self.assertEqual(first.status_code, 201)

        reply = self.client.post(url, {'text': 'reply', 'parentCommentId': first.data['id']}, format='json')
        self.assertEqual(reply.status_code, 201)
        self.assertEqual(reply.data['parentCommentId'], first.data['id'])

        listing = self.client.get(url)
        self.assertEqual([c['id'] for c in listing.data['comments']], [second.data['id'], first.data['id']])
        self.assertEqual(listing.data['totalComments'], 2)

        replies = self.client.get(reverse('posts:comment-replies', kwargs={'comment_id': first.data['id']}))
        self.assertEqual([c['id'] for c in replies.data['replies']], [reply.data['id']])

    def test_page_past_the_end_is_empty(self):
        url = reverse('posts:comment-collection', kwargs={'post_id': self.post.id})
        self.client.post(url, {'text': 'one'}, format='json')

        response = self.client.get(url, {'page': 5})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['comments'], [])
        self.assertFalse(response.data['hasNextPage'])

    def test_delete_endpoint(self):
        comment = comment_service.create_comment(self.alice, self.post.id, text='bye')
        response = self.client.delete(reverse('posts:comment-detail', kwargs={'comment_id': comment.id}))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['message'], 'Comment deleted successfully')
