import json
import logging
from channels.generic.websocket import WebsocketConsumer
from asgiref.sync import async_to_sync
from .middleware import SESSION_SCOPE_KEY
from .realtime import ORDERS_GROUP

# Configuración del logger
logger = logging.getLogger(__name__)


class OrderChangesConsumer(WebsocketConsumer):
    """
    Consumer del feed de cambios de pedidos.

    URL: ws://localhost:8000/ws/orders/?token=<jwt_access_token>

    Protocolo (solo servidor → cliente):
    - Al conectar: {"type": "connection_established", "role": "worker", ...}
    - Por cada cambio: {"type": "order_change", "event": "INSERT"|"UPDATE"|"DELETE",
      "record": {...} | null, "old": {"id": "..."}}

    Los mensajes enviados por el cliente se ignoran.
    """

    def connect(self):
        """
        Valida la sesión antes de aceptar.

        Códigos de cierre:
        - 4001: Usuario no autenticado o sin perfil activo
        """
        self.session = self.scope.get(SESSION_SCOPE_KEY)

        if self.session is None:
            logger.warning("Intento de conexión anónima al feed de pedidos")
            self.close(code=4001)
            return

        async_to_sync(self.channel_layer.group_add)(
            ORDERS_GROUP,
            self.channel_name
        )
        self.joined = True

        self.accept()

        logger.info(f"{self.session.profile.email} ({self.session.role}) conectado al feed de pedidos")

        self.send(text_data=json.dumps({
            'type': 'connection_established',
            'message': 'Suscrito a cambios de pedidos',
            'role': self.session.role,
        }))

    def disconnect(self, close_code):
        """
        Sale del grupo y descarta la sesión de la conexión.

        Args:
            close_code (int): Código de cierre de la conexión
        """
        if getattr(self, 'joined', False):
            async_to_sync(self.channel_layer.group_discard)(
                ORDERS_GROUP,
                self.channel_name
            )
            self.joined = False

        session = getattr(self, 'session', None)
        if session is not None:
            logger.info(f"{session.profile.email} desconectado del feed (código: {close_code})")
        self.session = None

    def receive(self, text_data=None, bytes_data=None):
        logger.debug("Mensaje de cliente ignorado en el feed de pedidos")

    def order_change(self, event):
        """
        Recibe el cambio del grupo y lo reenvía al cliente.

        Args:
            event (dict): Evento con ``event``, ``record`` y ``old``
        """
        self.send(text_data=json.dumps({
            'type': 'order_change',
            'event': event['event'],
            'record': event['record'],
            'old': event['old'],
        }))

        logger.debug(f"Cambio {event['event']} de orden {event['old'].get('id')} enviado")
