from datetime import timedelta

from flask_jwt_extended import create_access_token

from app.errors import ApiError, ErrorKind
from app.extensions import db
from auth import service as auth_service
from auth.models import User
from friends.models import Friend
from trips import activities, comments, members, votes
from trips.models import Activity, Comment, Trip, TripMember, Vote
from users import service
from tests.factories import ApiTestCase, auth_header, make_friendship, make_trip, make_user


class TestAuthRoutes(ApiTestCase):
    def test_register_returns_token(self):
        response = self.client.post('/api/auth/register', json={
            'username': 'newbie',
            'password': 'secret123',
            'first_name': 'New',
            'last_name': 'User',
            'email': 'newbie@example.com',
        })

        self.assertEqual(response.status_code, 201)
        self.assertIn('token', response.json)

        me = self.client.get('/api/auth/me', headers={'Authorization': f"Bearer {response.json['token']}"})
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json['username'], 'newbie')
        self.assertFalse(me.json['is_admin'])

    def test_register_cannot_grant_admin(self):
        response = self.client.post('/api/auth/register', json={
            'username': 'sneaky',
            'password': 'secret123',
            'first_name': 'Sneaky',
            'last_name': 'User',
            'email': 'sneaky@example.com',
            'is_admin': True,
        })

        self.assertEqual(response.status_code, 400)
        self.assertIsNone(User.query.filter_by(username='sneaky').first())

    def test_register_validation(self):
        base = {'username': 'newbie', 'password': 'secret123', 'first_name': 'New',
                'last_name': 'User', 'email': 'newbie@example.com'}
        for override in ({'email': 'not-an-email'}, {'password': '123'}, {'username': 'x'}):
            response = self.client.post('/api/auth/register', json=dict(base, **override))
            self.assertEqual(response.status_code, 400, override)

    def test_duplicate_username_or_email(self):
        make_user('alice')

        with self.assertRaises(ApiError) as cm:
            auth_service.register('alice', 'secret123', 'A', 'B', 'other@example.com')
        self.assertEqual(cm.exception.message, 'Username or email already exists.')

        with self.assertRaises(ApiError):
            auth_service.register('other', 'secret123', 'A', 'B', 'alice@example.com')

    def test_token(self):
        make_user('alice', password='secret123')

        response = self.client.post('/api/auth/token', json={'username': 'alice', 'password': 'secret123'})
        self.assertEqual(response.status_code, 200)
        self.assertIn('token', response.json)

        response = self.client.post('/api/auth/token', json={'username': 'alice', 'password': 'wrong'})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json, {'error': 'Invalid username/password'})

        response = self.client.post('/api/auth/token', json={'username': 'nobody', 'password': 'secret123'})
        self.assertEqual(response.status_code, 401)

    def test_invalid_and_expired_tokens(self):
        alice = make_user('alice')

        response = self.client.get('/api/auth/me', headers={'Authorization': 'Bearer not.a.token'})
        self.assertEqual(response.status_code, 401)

        expired = create_access_token(identity=str(alice.id), expires_delta=timedelta(seconds=-1))
        response = self.client.get('/api/auth/me', headers={'Authorization': f'Bearer {expired}'})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json, {'error': 'Token has expired'})


class TestUserRoutes(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.admin = make_user('admin', is_admin=True)
        self.alice = make_user('alice')
        self.bob = make_user('bob')

    def test_admin_creates_user(self):
        body = {'username': 'helper', 'password': 'secret123', 'first_name': 'Help',
                'last_name': 'Er', 'email': 'helper@example.com', 'is_admin': True}

        response = self.client.post('/api/users', headers=auth_header(self.alice), json=body)
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json, {'error': 'You must be an admin.'})

        response = self.client.post('/api/users', headers=auth_header(self.admin), json=body)
        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.json['user']['is_admin'])
        self.assertIn('token', response.json)

    def test_search(self):
        response = self.client.get('/api/users?query=AL', headers=auth_header(self.bob))
        self.assertEqual(response.status_code, 200)
        self.assertEqual([u['username'] for u in response.json['users']], ['alice'])

        response = self.client.get('/api/users', headers=auth_header(self.bob))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json, {'error': 'Search query is required.'})

    def test_search_wildcards_match_literally(self):
        make_user('a_b')

        response = self.client.get('/api/users?query=_', headers=auth_header(self.bob))
        self.assertEqual([u['username'] for u in response.json['users']], ['a_b'])

        response = self.client.get('/api/users?query=%25', headers=auth_header(self.bob))
        self.assertEqual(response.json['users'], [])

    def test_get_user_assembles_trips_and_relationships(self):
        carol = make_user('carol')
        make_friendship(self.alice, self.bob)
        make_friendship(carol, self.alice, accepted=False)
        own = make_trip(self.alice, title='Alice trip')
        joined = make_trip(self.bob, title='Bob trip')
        members.add_member(self.alice.id, joined.id)
        db.session.commit()

        response = self.client.get('/api/users/alice', headers=auth_header(self.alice))

        self.assertEqual(response.status_code, 200)
        user = response.json['user']
        self.assertEqual([(t['id'], t['role']) for t in user['trips']], [(joined.id, 'member'), (own.id, 'owner')])
        self.assertEqual([f['user']['username'] for f in user['friends']], ['bob'])
        self.assertEqual([f['user']['username'] for f in user['friend_requests']], ['carol'])
        self.assertEqual(user['sent_requests'], [])

    def test_other_users_profile_is_off_limits(self):
        response = self.client.get('/api/users/alice', headers=auth_header(self.bob))
        self.assertEqual(response.status_code, 401)

        response = self.client.get('/api/users/alice', headers=auth_header(self.admin))
        self.assertEqual(response.status_code, 200)

        response = self.client.get('/api/users/nobody', headers=auth_header(self.admin))
        self.assertEqual(response.status_code, 404)

    def test_update_user(self):
        response = self.client.patch('/api/users/alice', headers=auth_header(self.alice),
                                     json={'bio': 'Loves trains', 'password': 'newsecret'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json['user']['bio'], 'Loves trains')
        self.assertEqual(auth_service.authenticate('alice', 'newsecret').username, 'alice')

    def test_update_user_rejects_taken_email_and_empty_patch(self):
        response = self.client.patch('/api/users/alice', headers=auth_header(self.alice),
                                     json={'email': 'bob@example.com'})
        self.assertEqual(response.status_code, 400)

        response = self.client.patch('/api/users/alice', headers=auth_header(self.alice), json={})
        self.assertEqual(response.status_code, 400)

        response = self.client.patch('/api/users/alice', headers=auth_header(self.alice),
                                     json={'username': 'alicia'})
        self.assertEqual(response.status_code, 400)

    def test_delete_user(self):
        response = self.client.delete('/api/users/alice', headers=auth_header(self.bob))
        self.assertEqual(response.status_code, 401)

        response = self.client.delete('/api/users/alice', headers=auth_header(self.alice))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json, {'deleted': 'alice'})
        self.assertIsNone(User.query.filter_by(username='alice').first())


class TestCascadingDeletes(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.alice = make_user('alice')
        self.bob = make_user('bob')
        make_friendship(self.alice, self.bob)

        self.alice_trip = make_trip(self.alice, title='Alice trip')
        self.bob_trip = make_trip(self.bob, title='Bob trip')
        members.add_member(self.alice.id, self.bob_trip.id)

        self.alice_activity = activities.create_activity(self.bob_trip.id, self.alice.id, 'Alice plan')
        self.bob_activity = activities.create_activity(self.bob_trip.id, self.bob.id, 'Bob plan')
        votes.cast_vote(self.bob.id, self.alice_activity.id, 1)
        votes.cast_vote(self.alice.id, self.bob_activity.id, -1)
        comments.create_comment(self.alice.id, self.bob_trip.id, 'See you there')
        db.session.commit()

    def test_removing_user_removes_everything_they_own(self):
        alice_id, bob_id = self.alice.id, self.bob.id
        bob_trip_id, bob_activity_id = self.bob_trip.id, self.bob_activity.id

        service.remove_user('alice')
        db.session.commit()

        self.assertEqual(Friend.query.count(), 0)
        self.assertEqual([t.id for t in Trip.query.all()], [bob_trip_id])
        self.assertEqual(TripMember.query.filter_by(user_id=alice_id).count(), 0)
        self.assertEqual([a.id for a in Activity.query.all()], [bob_activity_id])
        self.assertEqual(Vote.query.count(), 0)
        self.assertEqual(Comment.query.count(), 0)
        self.assertIsNotNone(db.session.get(User, bob_id))

    def test_removing_trip_removes_its_content(self):
        from trips import service as trips_service

        trips_service.remove_trip(self.bob_trip.id)
        db.session.commit()

        self.assertEqual(Activity.query.count(), 0)
        self.assertEqual(Vote.query.count(), 0)
        self.assertEqual(Comment.query.count(), 0)
        self.assertEqual(TripMember.query.count(), 1)

    def test_unknown_user(self):
        with self.assertRaises(ApiError) as cm:
            service.remove_user('nobody')
        self.assertEqual(cm.exception.kind, ErrorKind.NOT_FOUND)


class TestTokensOfDeletedUsers(ApiTestCase):
    def setUp(self):
        super().setUp()
        alice = make_user('alice')
        self.bob_id = make_user('bob').id
        self.stale_header = auth_header(alice)
        service.remove_user('alice')
        db.session.commit()

    def assert_rejected(self, response):
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json, {'error': 'User no longer exists.'})

    def test_create_trip(self):
        response = self.client.post('/api/trips', headers=self.stale_header,
                                    json={'title': 'Ghost trip', 'destination': 'Nowhere', 'radius': 1})

        self.assert_rejected(response)
        self.assertEqual(Trip.query.count(), 0)

    def test_send_friend_request(self):
        response = self.client.post(f'/api/friends/{self.bob_id}', headers=self.stale_header)

        self.assert_rejected(response)
        self.assertEqual(Friend.query.count(), 0)

    def test_read_routes(self):
        for url in ('/api/auth/me', '/api/friends', '/api/trips', '/api/users?query=b'):
            self.assert_rejected(self.client.get(url, headers=self.stale_header))

    def test_new_account_with_same_username(self):
        make_user('alice', email='alice.again@example.com')

        self.assert_rejected(self.client.get('/api/users/alice', headers=self.stale_header))
        self.assert_rejected(self.client.patch('/api/users/alice', headers=self.stale_header,
                                               json={'bio': 'Not mine'}))
        self.assert_rejected(self.client.delete('/api/users/alice', headers=self.stale_header))

        user = User.query.filter_by(username='alice').first()
        self.assertIsNotNone(user)
        self.assertIsNone(user.bio)
