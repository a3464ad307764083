"""
Tests del feed de cambios en tiempo real.

Cubre:
- Construcción de eventos INSERT / UPDATE / DELETE
- Publicación solo al confirmar la transacción
- Autenticación JWT del WebSocket
- Consumer: rechazo anónimo, suscripción y reenvío de cambios
"""
from unittest.mock import patch

from channels.layers import get_channel_layer
from channels.testing import WebsocketCommunicator
from django.db import transaction
from django.test import TestCase, TransactionTestCase
from rest_framework_simplejwt.tokens import AccessToken

from users.models import Profile, User
from users.session import Session
from orders.consumers import OrderChangesConsumer
from orders.middleware import session_from_token
from orders.models import Order
from orders.realtime import ORDERS_GROUP, build_change_event
from orders.workflow import claim_order
from .helpers import create_order, create_profile


class BuildChangeEventTests(TestCase):

    def setUp(self):
        self.admin = create_profile('admin@test.com', role=Profile.Role.ADMIN)
        self.order = create_order(self.admin)

    def test_update_event_carries_full_record(self):
        payload = build_change_event(self.order, 'UPDATE')

        self.assertEqual(payload['type'], 'order.change')
        self.assertEqual(payload['event'], 'UPDATE')
        self.assertEqual(payload['record']['id'], str(self.order.id))
        self.assertEqual(payload['record']['total_amount'], '25.00')
        self.assertEqual(payload['old'], {'id': str(self.order.id)})

    def test_delete_event_has_no_record(self):
        payload = build_change_event(self.order, 'DELETE')

        self.assertIsNone(payload['record'])
        self.assertEqual(payload['old']['id'], str(self.order.id))

    def test_unknown_event_type(self):
        with self.assertRaises(ValueError):
            build_change_event(self.order, 'TRUNCATE')


@patch('orders.realtime.publisher.async_to_sync')
class PublishOnCommitTests(TestCase):

    def setUp(self):
        self.admin = create_profile('admin@test.com', role=Profile.Role.ADMIN)
        self.worker = create_profile('worker@test.com')

    def sent_events(self, mock_async_to_sync):
        group_send = mock_async_to_sync.return_value
        return [call.args for call in group_send.call_args_list]

    def test_create_broadcasts_insert(self, mock_async_to_sync):
        with self.captureOnCommitCallbacks(execute=True):
            order = create_order(self.admin)

        sent = self.sent_events(mock_async_to_sync)
        self.assertEqual(len(sent), 1)
        group, payload = sent[0]
        self.assertEqual(group, ORDERS_GROUP)
        self.assertEqual(payload['event'], 'INSERT')
        self.assertEqual(payload['record']['id'], str(order.id))

    def test_claim_broadcasts_update(self, mock_async_to_sync):
        order = create_order(self.admin)

        with self.captureOnCommitCallbacks(execute=True):
            claim_order(order.id, self.worker)

        sent = self.sent_events(mock_async_to_sync)
        self.assertEqual(len(sent), 1)
        payload = sent[0][1]
        self.assertEqual(payload['event'], 'UPDATE')
        self.assertEqual(payload['record']['status'], Order.Status.IN_PROGRESS)
        self.assertEqual(payload['record']['assigned_to'], self.worker.pk)

    def test_rolled_back_write_is_not_broadcast(self, mock_async_to_sync):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            try:
                with transaction.atomic():
                    create_order(self.admin)
                    raise RuntimeError('rollback')
            except RuntimeError:
                pass

        self.assertEqual(callbacks, [])
        mock_async_to_sync.return_value.assert_not_called()

    def test_delete_broadcasts_delete(self, mock_async_to_sync):
        order = create_order(self.admin)
        order_id = str(order.id)

        with self.captureOnCommitCallbacks(execute=True):
            order.delete()

        payload = self.sent_events(mock_async_to_sync)[0][1]
        self.assertEqual(payload['event'], 'DELETE')
        self.assertIsNone(payload['record'])
        self.assertEqual(payload['old']['id'], order_id)


class WebsocketTokenTests(TestCase):

    def setUp(self):
        self.worker = create_profile('worker@test.com')

    def test_valid_token_resolves_session(self):
        token = str(AccessToken.for_user(self.worker.user))
        user, session = session_from_token(token)

        self.assertEqual(user, self.worker.user)
        self.assertEqual(session.profile, self.worker)
        self.assertTrue(session.is_worker)

    def test_invalid_token_is_anonymous(self):
        user, session = session_from_token('not-a-valid-jwt-token')

        self.assertFalse(user.is_authenticated)
        self.assertIsNone(session)

    def test_deactivated_profile_is_rejected(self):
        token = str(AccessToken.for_user(self.worker.user))
        self.worker.is_active = False
        self.worker.save(update_fields=['is_active'])

        user, session = session_from_token(token)
        self.assertIsNone(session)


def build_session(role):
    user = User(email=f'{role}@test.com', full_name=role)
    return Session(user=user, profile=Profile(user=user, email=user.email, full_name=role, role=role))


class OrderChangesConsumerTests(TransactionTestCase):
    """El dispatch síncrono del consumer cierra conexiones viejas, así que necesita acceso a la BD."""

    def communicator(self, session):
        communicator = WebsocketCommunicator(OrderChangesConsumer.as_asgi(), '/ws/orders/')
        communicator.scope['order_session'] = session
        return communicator

    async def test_anonymous_connection_is_closed(self):
        communicator = self.communicator(None)
        connected, close_code = await communicator.connect()

        self.assertFalse(connected)
        self.assertEqual(close_code, 4001)

    async def test_connection_established_message(self):
        communicator = self.communicator(build_session(Profile.Role.WORKER))
        connected, _ = await communicator.connect()
        self.assertTrue(connected)

        message = await communicator.receive_json_from()
        self.assertEqual(message['type'], 'connection_established')
        self.assertEqual(message['role'], 'worker')

        await communicator.disconnect()

    async def test_group_changes_are_forwarded(self):
        communicator = self.communicator(build_session(Profile.Role.ADMIN))
        await communicator.connect()
        await communicator.receive_json_from()

        await get_channel_layer().group_send(ORDERS_GROUP, {
            'type': 'order.change',
            'event': 'UPDATE',
            'record': {'id': 'abc', 'status': 'in_progress'},
            'old': {'id': 'abc'},
        })

        message = await communicator.receive_json_from()
        self.assertEqual(message, {
            'type': 'order_change',
            'event': 'UPDATE',
            'record': {'id': 'abc', 'status': 'in_progress'},
            'old': {'id': 'abc'},
        })

        await communicator.disconnect()

    async def test_client_messages_are_ignored(self):
        communicator = self.communicator(build_session(Profile.Role.WORKER))
        await communicator.connect()
        await communicator.receive_json_from()

        await communicator.send_json_to({'type': 'subscribe'})
        self.assertTrue(await communicator.receive_nothing())

        await communicator.disconnect()
