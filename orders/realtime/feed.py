"""
Client side of the order change feed.

``OrderFeed`` keeps a local, newest-first view of orders and folds change
events into it. Delivery is only "eventually": events may arrive twice or out
of order, so every merge is keyed on the order id and its ``updated_at``.

    - INSERT prepends (or behaves as UPDATE if the id is already known).
    - UPDATE replaces by id when the incoming ``updated_at`` is newer; an
      UPDATE for an unknown id is inserted.
    - DELETE removes by id and leaves a tombstone, so late events for that id
      are ignored.
"""
import logging
from datetime import datetime

from django.utils.dateparse import parse_datetime

logger = logging.getLogger(__name__)


def _version(record):
    value = record.get('updated_at')
    if isinstance(value, datetime):
        return value
    if value:
        return parse_datetime(value)
    return None


def _is_newer(incoming, current):
    new_version, old_version = _version(incoming), _version(current)
    if new_version is None:
        return old_version is None and incoming != current
    if old_version is None:
        return True
    return new_version > old_version


class OrderFeed:

    def __init__(self, records=(), predicate=None):
        """
        Args:
            records: initial snapshot, newest first.
            predicate: optional ``record -> bool``; records that stop matching
                it leave the view (e.g. "available orders" drops claimed ones).
        """
        self.predicate = predicate
        self._orders = []
        self._tombstones = set()
        self.load(records)

    def load(self, records):
        """Replace the view with a fresh snapshot."""
        self._orders = [dict(r) for r in records if self._accepts(r)]

    @property
    def orders(self):
        return list(self._orders)

    def get(self, order_id):
        index = self._index_of(str(order_id))
        return None if index is None else self._orders[index]

    def __len__(self):
        return len(self._orders)

    def __contains__(self, order_id):
        return self._index_of(str(order_id)) is not None

    def apply(self, event):
        """
        Merge one change event.

        Returns:
            bool: True when the local view changed.
        """
        kind = event.get('event')
        if kind == 'DELETE':
            old = event.get('old') or {}
            return self._delete(str(old.get('id')))
        if kind in ('INSERT', 'UPDATE'):
            return self._upsert(event.get('record') or {})

        logger.warning(f"Ignoring unknown order event: {kind}")
        return False

    def _accepts(self, record):
        return self.predicate is None or self.predicate(record)

    def _index_of(self, order_id):
        for index, record in enumerate(self._orders):
            if str(record.get('id')) == order_id:
                return index
        return None

    def _upsert(self, record):
        order_id = str(record.get('id'))
        if order_id in self._tombstones:
            return False

        index = self._index_of(order_id)
        if index is None:
            if not self._accepts(record):
                return False
            self._orders.insert(0, dict(record))
            return True

        if not _is_newer(record, self._orders[index]):
            return False

        if self._accepts(record):
            self._orders[index] = dict(record)
        else:
            del self._orders[index]
        return True

    def _delete(self, order_id):
        self._tombstones.add(order_id)
        index = self._index_of(order_id)
        if index is None:
            return False
        del self._orders[index]
        return True
