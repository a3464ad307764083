"""
Comando para seguir en vivo los cambios de pedidos.

Se conecta al feed WebSocket, mantiene una vista local con ``OrderFeed`` y
registra cada cambio aplicado.

Uso:
    python manage.py watch_orders --token <jwt_access_token>
    python manage.py watch_orders --token <jwt> --available
"""

import asyncio
import json
import logging

import websockets
from django.core.management.base import BaseCommand, CommandError

from orders.models import Order
from orders.realtime import OrderFeed

logger = logging.getLogger(__name__)

DEFAULT_URL = 'ws://127.0.0.1:8000/ws/orders/'


def is_available(record):
    return record.get('status') == Order.Status.PENDING and record.get('assigned_to') is None


class Command(BaseCommand):
    help = 'Sigue en vivo el feed de cambios de pedidos'

    def add_arguments(self, parser):
        parser.add_argument(
            '--token',
            required=True,
            help='JWT de acceso (POST /api/auth/login/)',
        )
        parser.add_argument(
            '--url',
            default=DEFAULT_URL,
            help=f'URL del feed (default: {DEFAULT_URL})',
        )
        parser.add_argument(
            '--available',
            action='store_true',
            help='Mantener solo pedidos pendientes sin asignar',
        )

    def handle(self, *args, **options):
        feed = OrderFeed(predicate=is_available if options['available'] else None)
        uri = f"{options['url']}?token={options['token']}"

        try:
            asyncio.run(self.watch(uri, feed))
        except KeyboardInterrupt:
            self.stdout.write('Detenido.')
        except websockets.exceptions.InvalidStatus as e:
            # Un token inválido cierra el handshake antes de aceptarlo (HTTP 403)
            raise CommandError(f"El servidor rechazó la conexión: {e}")
        except OSError as e:
            raise CommandError(f"No se pudo conectar a {options['url']}: {e}")

    async def watch(self, uri, feed):
        async with websockets.connect(uri) as websocket:
            async for raw in websocket:
                self.handle_message(json.loads(raw), feed)

    def handle_message(self, message, feed):
        kind = message.get('type')

        if kind == 'connection_established':
            self.stdout.write(self.style.SUCCESS(f"Conectado como {message.get('role')}"))
            return

        if kind != 'order_change':
            logger.debug(f"Mensaje ignorado: {kind}")
            return

        changed = feed.apply(message)
        order_id = (message.get('old') or {}).get('id')
        if changed:
            record = message.get('record') or {}
            self.stdout.write(
                f"{message['event']:<6} {order_id} "
                f"{record.get('status', '-'):<12} ({len(feed)} en vista)"
            )
        else:
            logger.debug(f"Evento {message['event']} de {order_id} sin efecto (duplicado o desfasado)")
