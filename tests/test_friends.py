from app.errors import ApiError, ErrorKind
from friends import service
from friends.models import Friend
from tests.factories import ApiTestCase, auth_header, make_friendship, make_user


class TestFriendService(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.alice = make_user('alice')
        self.bob = make_user('bob')

    def test_send_request_creates_pending_row(self):
        friendship = service.send_request(self.alice.id, self.bob.id)

        self.assertEqual(friendship.status, 'pending')
        self.assertEqual(friendship.sender_id, self.alice.id)
        self.assertEqual(friendship.recipient_id, self.bob.id)

    def test_cannot_befriend_yourself(self):
        with self.assertRaises(ApiError) as cm:
            service.send_request(self.alice.id, self.alice.id)
        self.assertEqual(cm.exception.kind, ErrorKind.BAD_REQUEST)

    def test_unknown_recipient(self):
        with self.assertRaises(ApiError) as cm:
            service.send_request(self.alice.id, 999)
        self.assertEqual(cm.exception.kind, ErrorKind.NOT_FOUND)

    def test_one_relationship_per_pair_in_either_direction(self):
        make_friendship(self.alice, self.bob, accepted=False)

        for sender, recipient in ((self.alice, self.bob), (self.bob, self.alice)):
            with self.assertRaises(ApiError) as cm:
                service.send_request(sender.id, recipient.id)
            self.assertEqual(cm.exception.message, 'Friend request already sent or you are already friends.')

        self.assertEqual(Friend.query.count(), 1)

    def test_no_new_request_between_friends(self):
        make_friendship(self.alice, self.bob)

        for sender, recipient in ((self.alice, self.bob), (self.bob, self.alice)):
            with self.assertRaises(ApiError) as cm:
                service.send_request(sender.id, recipient.id)
            self.assertEqual(cm.exception.kind, ErrorKind.BAD_REQUEST)

        self.assertEqual(Friend.query.count(), 1)
        self.assertEqual(Friend.query.one().status, 'accepted')

    def test_only_recipient_accepts(self):
        friendship = make_friendship(self.alice, self.bob, accepted=False)

        with self.assertRaises(ApiError) as cm:
            service.accept_request(friendship.id, self.alice.id)
        self.assertEqual(cm.exception.message, 'Only the recipient can accept the friend request.')

        accepted = service.accept_request(friendship.id, self.bob.id)
        self.assertEqual(accepted.status, 'accepted')

    def test_accepting_twice_fails(self):
        friendship = make_friendship(self.alice, self.bob)

        with self.assertRaises(ApiError) as cm:
            service.accept_request(friendship.id, self.bob.id)
        self.assertEqual(cm.exception.message, 'Friend request is not pending.')

    def test_are_friends_is_symmetric_and_needs_acceptance(self):
        friendship = make_friendship(self.alice, self.bob, accepted=False)
        self.assertFalse(service.are_friends(self.alice.id, self.bob.id))

        service.accept_request(friendship.id, self.bob.id)
        self.assertTrue(service.are_friends(self.alice.id, self.bob.id))
        self.assertTrue(service.are_friends(self.bob.id, self.alice.id))

    def test_remove_then_request_again(self):
        friendship = make_friendship(self.alice, self.bob)
        friendship_id = friendship.id

        self.assertEqual(service.remove(friendship_id), {'removed': friendship_id})
        self.assertFalse(service.are_friends(self.alice.id, self.bob.id))

        again = service.send_request(self.bob.id, self.alice.id)
        self.assertEqual(again.status, 'pending')

    def test_relationships_are_partitioned(self):
        carol = make_user('carol')
        dave = make_user('dave')
        make_friendship(self.alice, self.bob)
        make_friendship(carol, self.alice, accepted=False)
        make_friendship(self.alice, dave, accepted=False)

        result = service.relationships_for_user(self.alice.id)

        self.assertEqual([r['user']['username'] for r in result['friends']], ['bob'])
        self.assertEqual([r['user']['username'] for r in result['incoming']], ['carol'])
        self.assertEqual([r['user']['username'] for r in result['outgoing']], ['dave'])


class TestFriendRoutes(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.alice = make_user('alice')
        self.bob = make_user('bob')
        self.carol = make_user('carol')

    def test_send_and_accept(self):
        response = self.client.post(f'/api/friends/{self.bob.id}', headers=auth_header(self.alice))
        self.assertEqual(response.status_code, 201)
        friendship_id = response.json['friend_request']['id']

        response = self.client.patch(f'/api/friends/{friendship_id}', headers=auth_header(self.bob))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json['accepted_friend']['status'], 'accepted')

        response = self.client.get('/api/friends', headers=auth_header(self.alice))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json['friends']), 1)
        self.assertEqual(response.json['friends'][0]['user']['username'], 'bob')

    def test_sender_cannot_accept(self):
        friendship = make_friendship(self.alice, self.bob, accepted=False)

        response = self.client.patch(f'/api/friends/{friendship.id}', headers=auth_header(self.alice))

        self.assertEqual(response.status_code, 400)

    def test_outsider_cannot_touch_relationship(self):
        friendship = make_friendship(self.alice, self.bob, accepted=False)

        response = self.client.delete(f'/api/friends/{friendship.id}', headers=auth_header(self.carol))

        self.assertEqual(response.status_code, 403)
        self.assertEqual(Friend.query.count(), 1)

    def test_recipient_declines(self):
        friendship = make_friendship(self.alice, self.bob, accepted=False)
        friendship_id = friendship.id

        response = self.client.delete(f'/api/friends/{friendship_id}', headers=auth_header(self.bob))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json, {'removed': friendship_id})
        self.assertEqual(Friend.query.count(), 0)

    def test_unknown_relationship(self):
        response = self.client.delete('/api/friends/42', headers=auth_header(self.alice))
        self.assertEqual(response.status_code, 404)

    def test_requires_login(self):
        response = self.client.get('/api/friends')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json, {'error': 'You must be logged in.'})
