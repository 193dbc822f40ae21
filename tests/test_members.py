from unittest import mock

from app.errors import ApiError, ErrorKind
from app.extensions import db
from trips import members
from trips.models import TripMember
from tests.factories import ApiTestCase, auth_header, make_friendship, make_trip, make_user


class TestMembership(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.owner = make_user('owner')
        self.friend = make_user('friend')
        self.stranger = make_user('stranger')
        make_friendship(self.owner, self.friend)
        self.trip = make_trip(self.owner)
        self.trip_id = self.trip.id

    def test_add_member_service(self):
        member = members.add_member(self.friend.id, self.trip_id)

        self.assertEqual(member.role, 'member')
        self.assertFalse(members.is_owner(self.friend.id, self.trip_id))

        with self.assertRaises(ApiError) as cm:
            members.add_member(self.friend.id, self.trip_id)
        self.assertEqual(cm.exception.message, 'User is already a member of this trip.')

    def test_duplicate_insert_is_bad_request(self):
        members.add_member(self.friend.id, self.trip_id)
        db.session.commit()

        # a concurrent request that passed the membership check loses on the unique constraint
        with mock.patch.object(members, 'is_member', return_value=None):
            with self.assertRaises(ApiError) as cm:
                members.add_member(self.friend.id, self.trip_id)

        self.assertEqual(cm.exception.kind, ErrorKind.BAD_REQUEST)
        self.assertEqual(cm.exception.message, 'User is already a member of this trip.')
        self.assertEqual(TripMember.query.filter_by(trip_id=self.trip_id).count(), 2)

    def test_invalid_role(self):
        with self.assertRaises(ApiError) as cm:
            members.add_member(self.friend.id, self.trip_id, role='admin')
        self.assertEqual(cm.exception.kind, ErrorKind.BAD_REQUEST)

    def test_is_member_with_existence_check(self):
        self.assertIsNone(members.is_member(self.stranger.id, self.trip_id))

        with self.assertRaises(ApiError) as cm:
            members.is_member(self.stranger.id, 999, check_exists=True)
        self.assertEqual(cm.exception.kind, ErrorKind.NOT_FOUND)

    def test_owner_adds_friend(self):
        response = self.client.post(f'/api/trips/{self.trip_id}/members', headers=auth_header(self.owner),
                                    json={'friend_id': self.friend.id})

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json['member']['user_id'], self.friend.id)
        self.assertEqual(response.json['member']['role'], 'member')

        response = self.client.get(f'/api/trips/{self.trip_id}/members', headers=auth_header(self.friend))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([m['username'] for m in response.json['members']], ['owner', 'friend'])

    def test_only_friends_can_be_added(self):
        response = self.client.post(f'/api/trips/{self.trip_id}/members', headers=auth_header(self.owner),
                                    json={'friend_id': self.stranger.id})

        self.assertEqual(response.status_code, 403)
        self.assertIsNone(members.is_member(self.stranger.id, self.trip_id))

    def test_only_owner_adds_members(self):
        members.add_member(self.friend.id, self.trip_id)
        make_friendship(self.friend, self.stranger)

        response = self.client.post(f'/api/trips/{self.trip_id}/members', headers=auth_header(self.friend),
                                    json={'friend_id': self.stranger.id})

        self.assertEqual(response.status_code, 403)

    def test_friend_id_must_be_an_integer(self):
        response = self.client.post(f'/api/trips/{self.trip_id}/members', headers=auth_header(self.owner),
                                    json={'friend_id': str(self.friend.id)})

        self.assertEqual(response.status_code, 400)

    def test_remove_member(self):
        members.add_member(self.friend.id, self.trip_id)
        friend_id = self.friend.id

        response = self.client.delete(f'/api/trips/{self.trip_id}/members/{friend_id}',
                                      headers=auth_header(self.owner))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json, {'removed': friend_id})
        self.assertEqual(TripMember.query.filter_by(trip_id=self.trip_id).count(), 1)

    def test_owner_membership_cannot_be_removed(self):
        response = self.client.delete(f'/api/trips/{self.trip_id}/members/{self.owner.id}',
                                      headers=auth_header(self.owner))

        self.assertEqual(response.status_code, 400)
        self.assertTrue(members.is_owner(self.owner.id, self.trip_id))
        self.assertIsNotNone(members.is_member(self.owner.id, self.trip_id))

    def test_removing_non_member_is_404(self):
        response = self.client.delete(f'/api/trips/{self.trip_id}/members/{self.stranger.id}',
                                      headers=auth_header(self.owner))

        self.assertEqual(response.status_code, 404)
