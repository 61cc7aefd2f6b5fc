from datetime import timedelta

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from django.urls import reverse
from rest_framework.test import APIClient

CustomUser = get_user_model()


class AccountsAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_signup_returns_tokens(self):
        response = self.client.post(
            reverse('signup'),
            {'email': 'New@Example.com', 'fullName': 'New User', 'password': 'password123'},
            format='json',
        )
        self.assertEqual(response.status_code, 201)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['email'], 'new@example.com')

    def test_duplicate_email_rejected(self):
        CustomUser.objects.create_user(email='taken@example.com', full_name='Taken', password='password123')
        response = self.client.post(
            reverse('signup'),
            {'email': 'taken@example.com', 'fullName': 'Other', 'password': 'password123'},
            format='json',
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Email already exists')

    def test_token_obtain_with_email(self):
        CustomUser.objects.create_user(email='alice@example.com', full_name='Alice', password='password123')
        response = self.client.post(
            reverse('token_obtain_pair'),
            {'email': 'alice@example.com', 'password': 'password123'},
            format='json',
        )
        self.assertEqual(response.status_code, 200)
        self.assertIn('access', response.data)

    def test_profile_read_and_update(self):
        user = CustomUser.objects.create_user(email='alice@example.com', full_name='Alice', password='password123')
        self.client.force_authenticate(user=user)

        me = self.client.get(reverse('profile'))
        self.assertEqual(me.data['fullName'], 'Alice')

        updated = self.client.put(
            reverse('profile'),
            {'job': 'Engineer', 'profilePic': 'https://cdn.example.com/me.png'},
            format='json',
        )
        self.assertEqual(updated.status_code, 200)
        self.assertEqual(updated.data['job'], 'Engineer')
        self.assertEqual(updated.data['profilePic'], 'https://cdn.example.com/me.png')

    def test_profile_requires_auth(self):
        self.assertEqual(self.client.get(reverse('profile')).status_code, 401)

    def test_active_users_count_uses_last_hour(self):
        viewer = CustomUser.objects.create_user(email='alice@example.com', full_name='Alice', password='password123')
        stale = CustomUser.objects.create_user(email='old@example.com', full_name='Old', password='password123')
        CustomUser.objects.filter(pk=stale.pk).update(last_active=timezone.now() - timedelta(hours=2))
        CustomUser.objects.create_user(email='bob@example.com', full_name='Bob', password='password123')

        self.client.force_authenticate(user=viewer)
        response = self.client.get(reverse('active-users-count'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data, {'activeUsersCount': 2})

    def test_touch_last_active_brings_user_back(self):
        user = CustomUser.objects.create_user(email='old@example.com', full_name='Old', password='password123')
        CustomUser.objects.filter(pk=user.pk).update(last_active=timezone.now() - timedelta(hours=2))

        user.touch_last_active()
        self.client.force_authenticate(user=user)
        self.assertEqual(self.client.get(reverse('active-users-count')).data['activeUsersCount'], 1)
