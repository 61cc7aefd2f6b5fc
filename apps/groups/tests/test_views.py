from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from apps.groups.models import Group, GroupMessage
from apps.groups.views import GroupViewSet
from services.group_fanout import GroupFanoutBridge

CustomUser = get_user_model()


class GroupAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.alice = CustomUser.objects.create_user(email='alice@example.com', full_name='Alice', password='password123')
        self.bob = CustomUser.objects.create_user(email='bob@example.com', full_name='Bob', password='password123')
        self.carol = CustomUser.objects.create_user(email='carol@example.com', full_name='Carol', password='password123')
        self.client.force_authenticate(user=self.alice)

        self.fanout = mock.MagicMock(spec=GroupFanoutBridge)
        self.fanout.emit_to_group.return_value = True
        self.fanout.emit_to_user.return_value = True
        self.fanout.notify_group_members.return_value = 2
        patcher = mock.patch.object(GroupViewSet, 'fanout', self.fanout)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _group(self, name='Team', members=None):
        group = Group.objects.create(name=name, created_by=self.alice)
        group.members.add(self.alice, *(members if members is not None else [self.bob]))
        return group

    def _events(self, method):
        return [c.args[1] for c in getattr(self.fanout, method).call_args_list]

    # Create ---------------------------------------
    def test_create_group_dedupes_members_and_notifies(self):
        response = self.client.post(
            reverse('groups:group-create'),
            {'name': '  Team  ', 'members': [self.bob.id, self.bob.id, self.alice.id]},
            format='json',
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['group']['name'], 'Team')
        self.assertEqual(len(response.data['group']['members']), 2)

        member_ids, event, payload = self.fanout.notify_group_members.call_args.args
        self.assertEqual(sorted(member_ids), sorted([self.alice.id, self.bob.id]))
        self.assertEqual(event, 'groupCreated')
        self.assertIn('You have been added to the group "Team"', payload['message'])

    def test_create_group_validation(self):
        no_name = self.client.post(reverse('groups:group-create'), {'name': ' ', 'members': [self.bob.id]}, format='json')
        self.assertEqual(no_name.status_code, 400)
        self.assertEqual(no_name.data['message'], 'Group name is required')

        no_members = self.client.post(reverse('groups:group-create'), {'name': 'Team', 'members': []}, format='json')
        self.assertEqual(no_members.data['message'], 'At least one member is required')

        ghost = self.client.post(reverse('groups:group-create'), {'name': 'Team', 'members': [99999]}, format='json')
        self.assertEqual(ghost.status_code, 400)
        self.assertEqual(ghost.data['message'], 'One or more users do not exist')
        self.assertFalse(Group.objects.exists())

    # Sidebar / history ----------------------------
    def test_sidebar_includes_last_message(self):
        group = self._group()
        GroupMessage.objects.create(group=group, sender=self.bob, text='first')
        GroupMessage.objects.create(group=group, sender=self.alice, text='latest')
        Group.objects.create(name='Elsewhere', created_by=self.carol).members.add(self.carol)

        response = self.client.get(reverse('groups:group-sidebar'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['lastMessage']['text'], 'latest')

    def test_messages_latest_page_oldest_first(self):
        group = self._group()
        for i in range(5):
            GroupMessage.objects.create(group=group, sender=self.bob, text=f'm{i}')

        response = self.client.get(reverse('groups:group-messages', kwargs={'group_id': group.id}), {'limit': 3})
        self.assertEqual([m['text'] for m in response.data['messages']], ['m2', 'm3', 'm4'])
        self.assertTrue(response.data['hasNextPage'])

    def test_messages_require_membership(self):
        group = self._group()
        self.client.force_authenticate(user=self.carol)
        response = self.client.get(reverse('groups:group-messages', kwargs={'group_id': group.id}))
        self.assertEqual(response.status_code, 403)

    def test_durable_send_persists_then_broadcasts(self):
        group = self._group()
        response = self.client.post(reverse('groups:group-send', kwargs={'group_id': group.id}), {'text': 'hi'}, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(GroupMessage.objects.filter(group=group).count(), 1)
        group_id, event, payload = self.fanout.emit_to_group.call_args.args
        self.assertEqual((group_id, event), (group.id, 'newGroupMessage'))
        self.assertFalse(payload['optimistic'])
        self.assertEqual(payload['id'], response.data['id'])

    def test_send_requires_content(self):
        group = self._group()
        response = self.client.post(reverse('groups:group-send', kwargs={'group_id': group.id}), {'text': ''}, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['message'], 'Message must contain text or image')
        self.fanout.emit_to_group.assert_not_called()

    # Membership -----------------------------------
    def test_add_user_notifies_room_and_new_member(self):
        group = self._group()
        response = self.client.put(reverse('groups:group-add-user', kwargs={'group_id': group.id}), {'userId': self.carol.id}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertTrue(group.has_member(self.carol.id))
        self.assertEqual(self._events('emit_to_group'), ['userAddedToGroup'])
        member_ids, event, _ = self.fanout.notify_group_members.call_args.args
        self.assertEqual((member_ids, event), ([self.carol.id], 'groupCreated'))

        again = self.client.put(reverse('groups:group-add-user', kwargs={'group_id': group.id}), {'userId': self.carol.id}, format='json')
        self.assertEqual(again.status_code, 400)

    def test_rename_by_creator(self):
        group = self._group()
        response = self.client.put(reverse('groups:group-rename', kwargs={'group_id': group.id}), {'name': 'Squad'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual((response.data['oldName'], response.data['newName']), ('Team', 'Squad'))
        _, event, payload = self.fanout.emit_to_group.call_args.args
        self.assertEqual(event, 'groupRenamed')
        self.assertEqual(payload['updatedBy'], 'Alice')

    def test_rename_rules(self):
        group = self._group()
        url = reverse('groups:group-rename', kwargs={'group_id': group.id})

        same = self.client.put(url, {'name': 'Team'}, format='json')
        self.assertEqual(same.data['message'], 'New name must be different from current name')

        too_long = self.client.put(url, {'name': 'x' * 51}, format='json')
        self.assertEqual(too_long.status_code, 400)

        self.client.force_authenticate(user=self.bob)
        not_creator = self.client.put(url, {'name': 'Squad'}, format='json')
        self.assertEqual(not_creator.status_code, 403)
        self.fanout.emit_to_group.assert_not_called()

    def test_leave_group(self):
        group = self._group()
        self.client.force_authenticate(user=self.bob)

        response = self.client.delete(reverse('groups:group-leave', kwargs={'group_id': group.id}))
        self.assertEqual(response.status_code, 200)
        self.assertFalse(group.has_member(self.bob.id))
        self.assertEqual(self._events('emit_to_group'), ['userLeftGroup'])
        self.fanout.evict_user_from_group.assert_called_once_with(group.id, self.bob.id)

        again = self.client.delete(reverse('groups:group-leave', kwargs={'group_id': group.id}))
        self.assertEqual(again.status_code, 400)

    def test_remove_user_creator_only(self):
        group = self._group(members=[self.bob, self.carol])
        url = reverse('groups:group-remove-user', kwargs={'group_id': group.id})

        self.client.force_authenticate(user=self.bob)
        forbidden = self.client.delete(url, {'userId': self.carol.id}, format='json')
        self.assertEqual(forbidden.status_code, 403)

        self.client.force_authenticate(user=self.alice)
        response = self.client.delete(url, {'userId': self.carol.id}, format='json')
        self.assertEqual(response.status_code, 200)
        self.assertFalse(group.has_member(self.carol.id))
        self.assertEqual(self._events('emit_to_group'), ['userRemovedFromGroup'])

    def test_unknown_group(self):
        response = self.client.put(reverse('groups:group-rename', kwargs={'group_id': 424242}), {'name': 'Squad'}, format='json')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data['message'], 'Group not found')
