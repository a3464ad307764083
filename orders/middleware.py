import logging
from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser
from rest_framework.exceptions import APIException
from rest_framework_simplejwt.tokens import AccessToken
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from users.models import User
from users.session import resolve_session
from urllib.parse import parse_qs

# Configuración de logger para middleware
logger = logging.getLogger(__name__)

SESSION_SCOPE_KEY = 'order_session'


def session_from_token(token_key):
    """
    Obtiene usuario y sesión desde el token JWT.

    Args:
        token_key (str): Token JWT de acceso

    Returns:
        tuple: (User | AnonymousUser, Session | None)
    """
    if not token_key or len(token_key) < 10:
        logger.warning("Token JWT vacío o demasiado corto")
        return AnonymousUser(), None

    try:
        # Validar y decodificar token JWT
        access_token = AccessToken(token_key)
        user_id = access_token['user_id']

        user = User.objects.get(id=user_id)
        session = resolve_session(user)

        logger.info(f"Usuario autenticado correctamente: {user.email}")
        return user, session

    except (InvalidToken, TokenError) as e:
        logger.warning(f"Token JWT inválido: {str(e)}")
    except User.DoesNotExist:
        logger.warning("Usuario no encontrado para user_id del token")
    except APIException as e:
        # Usuario o perfil inactivo
        logger.warning(f"Sesión rechazada: {e.detail}")

    return AnonymousUser(), None


get_session_from_token = database_sync_to_async(session_from_token)


class JWTAuthMiddleware(BaseMiddleware):
    """
    Middleware para autenticar WebSockets usando JWT desde query params.

    Uso: ws://localhost:8000/ws/orders/?token=<jwt_access_token>

    Si el token es válido, el usuario y su sesión (perfil + rol) se agregan al
    scope; la sesión vive lo que dure la conexión.
    """

    async def __call__(self, scope, receive, send):
        # Copia del scope para no compartir estado entre conexiones
        scope = dict(scope)

        query_string = scope.get('query_string', b'').decode('utf-8')
        query_params = parse_qs(query_string)

        token = query_params.get('token', [None])[0]

        if token:
            scope['user'], scope[SESSION_SCOPE_KEY] = await get_session_from_token(token)
            logger.debug(f"WebSocket scope actualizado con usuario: {scope['user']}")
        else:
            scope['user'], scope[SESSION_SCOPE_KEY] = AnonymousUser(), None
            logger.debug("WebSocket conectado sin token (usuario anónimo)")

        return await super().__call__(scope, receive, send)
