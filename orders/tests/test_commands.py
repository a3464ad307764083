"""
Tests del comando watch_orders.

Cubre el manejo de mensajes del feed; la conexión WebSocket en sí
(``Command.watch``) necesita un servidor en marcha y no se prueba aquí.
"""
from io import StringIO

from django.test import SimpleTestCase

from orders.management.commands.watch_orders import Command, is_available
from orders.realtime import OrderFeed


def change(kind, order_id, status='pending', assigned_to=None, updated_at='2026-01-01T10:00:00Z'):
    return {
        'type': 'order_change',
        'event': kind,
        'record': {
            'id': order_id,
            'status': status,
            'assigned_to': assigned_to,
            'updated_at': updated_at,
        },
        'old': {'id': order_id},
    }


class WatchOrdersMessageTests(SimpleTestCase):

    def setUp(self):
        self.out = StringIO()
        self.command = Command(stdout=self.out, no_color=True)
        self.feed = OrderFeed()

    def test_connection_established(self):
        self.command.handle_message({'type': 'connection_established', 'role': 'worker'}, self.feed)

        self.assertEqual(self.out.getvalue(), 'Conectado como worker\n')

    def test_change_is_applied_and_printed(self):
        self.command.handle_message(change('INSERT', 'order-1'), self.feed)

        self.assertIn('order-1', self.feed)
        line = self.out.getvalue()
        self.assertTrue(line.startswith('INSERT order-1 pending'))
        self.assertIn('(1 en vista)', line)

    def test_duplicate_change_is_not_printed(self):
        message = change('INSERT', 'order-1')
        self.command.handle_message(message, self.feed)
        self.command.handle_message(message, self.feed)

        self.assertEqual(len(self.out.getvalue().splitlines()), 1)
        self.assertEqual(len(self.feed), 1)

    def test_delete_is_printed(self):
        self.command.handle_message(change('INSERT', 'order-1'), self.feed)
        self.command.handle_message(
            {'type': 'order_change', 'event': 'DELETE', 'record': None, 'old': {'id': 'order-1'}},
            self.feed,
        )

        lines = self.out.getvalue().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[1].startswith('DELETE order-1 -'))
        self.assertIn('(0 en vista)', lines[1])

    def test_other_messages_are_ignored(self):
        self.command.handle_message({'type': 'pong'}, self.feed)

        self.assertEqual(self.out.getvalue(), '')
        self.assertEqual(len(self.feed), 0)


class AvailableFilterTests(SimpleTestCase):

    def test_predicate(self):
        self.assertTrue(is_available({'status': 'pending', 'assigned_to': None}))
        self.assertFalse(is_available({'status': 'in_progress', 'assigned_to': 3}))
        self.assertFalse(is_available({'status': 'pending', 'assigned_to': 3}))

    def test_claimed_order_leaves_available_view(self):
        out = StringIO()
        command = Command(stdout=out, no_color=True)
        feed = OrderFeed(predicate=is_available)

        command.handle_message(change('INSERT', 'order-1'), feed)
        command.handle_message(
            change('UPDATE', 'order-1', status='in_progress', assigned_to=3,
                   updated_at='2026-01-01T10:05:00Z'),
            feed,
        )

        self.assertNotIn('order-1', feed)
        lines = out.getvalue().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertIn('(0 en vista)', lines[1])
