from datetime import timedelta
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models.query import QuerySet
from django.test import TestCase, TransactionTestCase
from django.utils import timezone
from django.urls import reverse
from rest_framework.test import APIClient

from apps.core.api_exceptions import NotFoundError, ValidationError
from apps.posts.constants import TARGET_COMMENT, TARGET_POST
from apps.posts.models import Comment, Post, Reaction
from apps.posts.services import reactions as ledger
from apps.posts.services.counters import reconcile_interaction_counters
from apps.posts.targets import resolve_target

CustomUser = get_user_model()


class ReactionLedgerTests(TestCase):
    def setUp(self):
        self.alice = CustomUser.objects.create_user(email='alice@example.com', full_name='Alice', password='password123')
        self.bob = CustomUser.objects.create_user(email='bob@example.com', full_name='Bob', password='password123')
        self.post = Post.objects.create(owner=self.alice, text='hello')
        self.target = resolve_target(TARGET_POST)

    def _live_total(self, kind, target_id):
        return Reaction.objects.filter(target_type=kind, target_id=target_id).count()

    def test_same_type_toggles_on_off_on(self):
        """Repeating a reaction type flips it; a third call adds it back."""
        first = ledger.set_reaction(self.bob, self.target, self.post.id, 'like')
        self.assertEqual(first.user_reaction, 'like')
        self.assertTrue(first.created)

        second = ledger.set_reaction(self.bob, self.target, self.post.id, 'like')
        self.assertIsNone(second.user_reaction)
        self.assertEqual(second.message, 'Reaction removed')
        self.assertEqual(second.counts['total'], 0)

        third = ledger.set_reaction(self.bob, self.target, self.post.id, 'like')
        self.assertEqual(third.user_reaction, 'like')
        self.assertEqual(third.counts['like'], 1)

    def test_different_type_switches_in_place(self):
        ledger.set_reaction(self.bob, self.target, self.post.id, 'like')
        outcome = ledger.set_reaction(self.bob, self.target, self.post.id, 'funny')

        self.assertEqual(outcome.message, 'Reaction updated')
        self.assertEqual(outcome.counts, {'love': 0, 'like': 0, 'funny': 1, 'horror': 0, 'total': 1})
        self.assertEqual(Reaction.objects.filter(user=self.bob).count(), 1)

    def test_counts_match_ledger_after_mixed_sequence(self):
        ledger.set_reaction(self.alice, self.target, self.post.id, 'love')
        ledger.set_reaction(self.bob, self.target, self.post.id, 'horror')
        ledger.set_reaction(self.bob, self.target, self.post.id, 'love')
        ledger.set_reaction(self.alice, self.target, self.post.id, 'love')

        self.post.refresh_from_db()
        self.assertEqual(self.post.reaction_counts['total'], self._live_total(TARGET_POST, self.post.id))
        self.assertEqual(self.post.reaction_counts['love'], 1)
        self.assertEqual(self.post.reaction_counts['horror'], 0)

    def test_ledger_rejects_duplicate_user_target_pair(self):
        Reaction.objects.create(user=self.bob, target_type=TARGET_POST, target_id=self.post.id, reaction_type='like')
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Reaction.objects.create(user=self.bob, target_type=TARGET_POST, target_id=self.post.id, reaction_type='love')

    def test_same_id_on_post_and_comment_are_separate_targets(self):
        comment = Comment.objects.create(owner=self.alice, post=self.post, text='c')
        ledger.set_reaction(self.bob, self.target, self.post.id, 'like')
        ledger.set_reaction(self.bob, resolve_target(TARGET_COMMENT), comment.id, 'like')

        self.assertEqual(Reaction.objects.filter(user=self.bob).count(), 2)

    def test_invalid_and_missing_reaction_type(self):
        with self.assertRaises(ValidationError):
            ledger.set_reaction(self.bob, self.target, self.post.id, 'angry')
        with self.assertRaises(ValidationError):
            ledger.set_reaction(self.bob, self.target, self.post.id, None)

    def test_missing_target_is_not_found(self):
        with self.assertRaises(NotFoundError):
            ledger.set_reaction(self.bob, self.target, 99999, 'like')

    def test_clear_without_reaction_is_not_found(self):
        with self.assertRaises(NotFoundError):
            ledger.clear_reaction(self.bob, self.target, self.post.id)

    def test_unknown_target_type(self):
        with self.assertRaises(ValidationError):
            resolve_target('video')

    def test_list_groups_every_type(self):
        ledger.set_reaction(self.alice, self.target, self.post.id, 'love')
        ledger.set_reaction(self.bob, self.target, self.post.id, 'like')

        grouped, counts = ledger.list_reactions(self.target, self.post.id)
        self.assertEqual(set(grouped.keys()), {'love', 'like', 'funny', 'horror'})
        self.assertEqual([r.user_id for r in grouped['like']], [self.bob.id])
        self.assertEqual(counts['total'], 2)

        filtered, _ = ledger.list_reactions(self.target, self.post.id, 'love')
        self.assertEqual(len(filtered['like']), 0)
        self.assertEqual(len(filtered['love']), 1)

    def test_list_orders_by_latest_reaction_time(self):
        """A switched reaction moves to the front of its group."""
        ledger.set_reaction(self.bob, self.target, self.post.id, 'like')
        ledger.set_reaction(self.alice, self.target, self.post.id, 'like')
        now = timezone.now()
        Reaction.objects.filter(user=self.bob).update(created_at=now - timedelta(minutes=3), updated_at=now - timedelta(minutes=3))
        Reaction.objects.filter(user=self.alice).update(created_at=now - timedelta(minutes=2), updated_at=now - timedelta(minutes=2))

        ledger.set_reaction(self.bob, self.target, self.post.id, 'love')
        ledger.set_reaction(self.bob, self.target, self.post.id, 'like')

        grouped, _ = ledger.list_reactions(self.target, self.post.id)
        self.assertEqual([r.user_id for r in grouped['like']], [self.bob.id, self.alice.id])


class ReactionAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.alice = CustomUser.objects.create_user(email='alice@example.com', full_name='Alice', password='password123')
        self.bob = CustomUser.objects.create_user(email='bob@example.com', full_name='Bob', password='password123')
        self.client.force_authenticate(user=self.bob)

    def test_hello_post_like_toggle_scenario(self):
        """A posts "hello"; B likes it, sees it in the feed, then likes again to remove."""
        post = Post.objects.create(owner=self.alice, text='hello')
        url = reverse('posts:post-reactions', kwargs={'target_id': post.id})

        response = self.client.post(url, {'type': 'like', 'targetType': 'post'}, format='json')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['reactionCounts']['like'], 1)
        self.assertEqual(response.data['reactionCounts']['total'], 1)
        self.assertEqual(response.data['userReaction'], 'like')

        feed = self.client.get(reverse('posts:post-collection'))
        self.assertEqual(feed.data['posts'][0]['userReaction'], 'like')

        response = self.client.post(url, {'type': 'like'}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['reactionCounts']['total'], 0)
        self.assertIsNone(response.data['userReaction'])

    def test_target_type_mismatch_is_rejected(self):
        post = Post.objects.create(owner=self.alice, text='hello')
        url = reverse('posts:post-reactions', kwargs={'target_id': post.id})

        response = self.client.post(url, {'type': 'like', 'targetType': 'comment'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertFalse(Reaction.objects.exists())

    def test_invalid_type_message(self):
        post = Post.objects.create(owner=self.alice, text='hello')
        url = reverse('posts:post-reactions', kwargs={'target_id': post.id})

        response = self.client.post(url, {'type': 'angry'}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('Invalid reaction type', response.data['message'])

    def test_comment_reactions_list_and_delete(self):
        post = Post.objects.create(owner=self.alice, text='hello')
        comment = Comment.objects.create(owner=self.alice, post=post, text='nice')
        url = reverse('posts:comment-reactions', kwargs={'target_id': comment.id})

        self.client.post(url, {'type': 'funny'}, format='json')
        listing = self.client.get(url, {'targetType': 'comment'})
        self.assertEqual(listing.status_code, 200)
        self.assertEqual(listing.data['totalReactions'], 1)
        self.assertEqual(listing.data['reactionsByType']['funny'][0]['user']['id'], self.bob.id)

        removed = self.client.delete(url)
        self.assertEqual(removed.status_code, 200)
        self.assertEqual(removed.data['reactionCounts']['total'], 0)

        again = self.client.delete(url)
        self.assertEqual(again.status_code, 404)

    def test_requires_authentication(self):
        post = Post.objects.create(owner=self.alice, text='hello')
        anonymous = APIClient()
        response = anonymous.post(reverse('posts:post-reactions', kwargs={'target_id': post.id}), {'type': 'like'}, format='json')
        self.assertEqual(response.status_code, 401)


class ConcurrentFirstReactionTests(TransactionTestCase):
    """Another writer inserts the row after our existence check but before our insert."""

    def setUp(self):
        self.alice = CustomUser.objects.create_user(email='alice@example.com', full_name='Alice', password='password123')
        self.bob = CustomUser.objects.create_user(email='bob@example.com', full_name='Bob', password='password123')
        self.post = Post.objects.create(owner=self.alice, text='hello')
        self.target = resolve_target(TARGET_POST)

    def _racing_ledger(self, competing_type):
        original = ledger._ledger
        calls = {'n': 0}

        def racing(user_id, target, target_id):
            calls['n'] += 1
            if calls['n'] == 1:
                Reaction.objects.create(
                    user_id=user_id, target_type=target.kind, target_id=target_id, reaction_type=competing_type,
                )
                return Reaction.objects.none()
            return original(user_id, target, target_id)

        return mock.patch.object(ledger, '_ledger', side_effect=racing)

    def test_same_type_race_toggles_off(self):
        with self._racing_ledger('like'):
            outcome = ledger.set_reaction(self.bob, self.target, self.post.id, 'like')

        self.assertIsNone(outcome.user_reaction)
        self.assertEqual(outcome.counts['total'], 0)
        self.assertFalse(Reaction.objects.filter(user=self.bob).exists())

    def test_different_type_race_switches_single_row(self):
        with self._racing_ledger('like'):
            outcome = ledger.set_reaction(self.bob, self.target, self.post.id, 'love')

        self.assertEqual(outcome.user_reaction, 'love')
        self.assertEqual(Reaction.objects.filter(user=self.bob).count(), 1)
        self.post.refresh_from_db()
        self.assertEqual(self.post.reaction_counts, {'love': 1, 'like': 0, 'funny': 0, 'horror': 0, 'total': 1})


class RecomputeWriteFailureTests(TestCase):
    def setUp(self):
        self.alice = CustomUser.objects.create_user(email='alice@example.com', full_name='Alice', password='password123')
        self.post = Post.objects.create(owner=self.alice, text='hello')
        self.target = resolve_target(TARGET_POST)

    def test_failed_write_returns_tally_and_reconcile_repairs(self):
        with mock.patch.object(QuerySet, 'update', side_effect=DatabaseError('write failed')):
            outcome = ledger.set_reaction(self.alice, self.target, self.post.id, 'funny')

        self.assertEqual(outcome.counts['funny'], 1)
        self.assertEqual(outcome.counts['total'], 1)
        self.post.refresh_from_db()
        self.assertEqual(self.post.reaction_counts['total'], 0)

        fixed = reconcile_interaction_counters()
        self.assertEqual(fixed['post_reactions'], 1)
        self.post.refresh_from_db()
        self.assertEqual(self.post.reaction_counts['funny'], 1)
        self.assertEqual(self.post.reaction_counts['total'], 1)
