"""
Tests de OrderFeed: fusión idempotente de eventos de cambio.
"""
from django.test import SimpleTestCase

from orders.realtime import OrderFeed


def record(order_id, updated_at, status='pending', assigned_to=None):
    return {
        'id': order_id,
        'status': status,
        'assigned_to': assigned_to,
        'updated_at': updated_at,
    }


def event(kind, rec=None, order_id=None):
    return {
        'type': 'order_change',
        'event': kind,
        'record': rec,
        'old': {'id': order_id or (rec or {}).get('id')},
    }


def is_available(rec):
    return rec.get('status') == 'pending' and rec.get('assigned_to') is None


class OrderFeedTests(SimpleTestCase):

    def setUp(self):
        self.feed = OrderFeed([
            record('b', '2026-01-01T10:00:00Z'),
            record('a', '2026-01-01T09:00:00Z'),
        ])

    def test_insert_prepends(self):
        changed = self.feed.apply(event('INSERT', record('c', '2026-01-01T11:00:00Z')))

        self.assertTrue(changed)
        self.assertEqual([o['id'] for o in self.feed.orders], ['c', 'b', 'a'])

    def test_duplicate_insert_is_idempotent(self):
        rec = record('c', '2026-01-01T11:00:00Z')
        self.feed.apply(event('INSERT', rec))
        changed = self.feed.apply(event('INSERT', rec))

        self.assertFalse(changed)
        self.assertEqual(len(self.feed), 3)

    def test_update_replaces_by_id(self):
        changed = self.feed.apply(event('UPDATE', record('a', '2026-01-01T12:00:00Z', status='in_progress')))

        self.assertTrue(changed)
        self.assertEqual(self.feed.get('a')['status'], 'in_progress')
        self.assertEqual([o['id'] for o in self.feed.orders], ['b', 'a'])

    def test_stale_update_is_ignored(self):
        self.feed.apply(event('UPDATE', record('a', '2026-01-01T12:00:00Z', status='completed')))
        changed = self.feed.apply(event('UPDATE', record('a', '2026-01-01T11:00:00Z', status='in_progress')))

        self.assertFalse(changed)
        self.assertEqual(self.feed.get('a')['status'], 'completed')

    def test_update_for_unknown_id_is_inserted(self):
        changed = self.feed.apply(event('UPDATE', record('z', '2026-01-01T12:00:00Z')))

        self.assertTrue(changed)
        self.assertIn('z', self.feed)

    def test_delete_removes_and_blocks_late_events(self):
        self.assertTrue(self.feed.apply(event('DELETE', order_id='a')))
        self.assertNotIn('a', self.feed)

        # Un UPDATE atrasado no la resucita
        self.assertFalse(self.feed.apply(event('UPDATE', record('a', '2026-01-02T00:00:00Z'))))
        self.assertNotIn('a', self.feed)

    def test_delete_unknown_id(self):
        self.assertFalse(self.feed.apply(event('DELETE', order_id='nope')))
        self.assertEqual(len(self.feed), 2)

    def test_unknown_event_is_ignored(self):
        self.assertFalse(self.feed.apply({'event': 'TRUNCATE'}))
        self.assertEqual(len(self.feed), 2)

    def test_same_events_in_any_order_converge(self):
        first = record('a', '2026-01-01T12:00:00Z', status='in_progress')
        second = record('a', '2026-01-01T13:00:00Z', status='completed')

        other = OrderFeed([record('a', '2026-01-01T09:00:00Z')])
        self.feed.apply(event('UPDATE', first))
        self.feed.apply(event('UPDATE', second))
        other.apply(event('UPDATE', second))
        other.apply(event('UPDATE', first))

        self.assertEqual(self.feed.get('a'), other.get('a'))


class AvailableOrderFeedTests(SimpleTestCase):
    """Vista de "pedidos disponibles": se vacía cuando otro trabajador toma el pedido."""

    def setUp(self):
        self.feed = OrderFeed(
            [
                record('a', '2026-01-01T09:00:00Z'),
                record('x', '2026-01-01T09:00:00Z', status='in_progress', assigned_to=7),
            ],
            predicate=is_available,
        )

    def test_snapshot_is_filtered(self):
        self.assertEqual([o['id'] for o in self.feed.orders], ['a'])

    def test_claimed_order_leaves_the_view(self):
        changed = self.feed.apply(event(
            'UPDATE', record('a', '2026-01-01T10:00:00Z', status='in_progress', assigned_to=3)
        ))

        self.assertTrue(changed)
        self.assertEqual(len(self.feed), 0)

    def test_released_order_comes_back(self):
        self.feed.apply(event(
            'UPDATE', record('a', '2026-01-01T10:00:00Z', status='in_progress', assigned_to=3)
        ))
        self.feed.apply(event('UPDATE', record('a', '2026-01-01T11:00:00Z')))

        self.assertIn('a', self.feed)

    def test_non_matching_insert_is_skipped(self):
        changed = self.feed.apply(event(
            'INSERT', record('n', '2026-01-01T10:00:00Z', status='cancelled')
        ))
        self.assertFalse(changed)
        self.assertNotIn('n', self.feed)
