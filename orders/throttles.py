from rest_framework.throttling import UserRateThrottle


class OrderClaimThrottle(UserRateThrottle):
    """
    Limita los intentos de tomar/liberar pedidos por usuario.
    Evita que un cliente en bucle martillee la escritura condicional.
    """
    scope = 'order_claims'
