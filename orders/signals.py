import logging
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
from .models import Order
from .realtime import publish_order_change

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Order)
def broadcast_order_saved(sender, instance, created, raw=False, **kwargs):
    """
    Publica INSERT/UPDATE cuando una orden se guarda con ``save()``.

    Las escrituras condicionales (``update_if``) no disparan post_save; el
    repositorio publica esos cambios directamente.
    """
    if raw:
        return
    publish_order_change(instance, 'INSERT' if created else 'UPDATE')
    logger.debug(f"Orden {instance.pk} {'creada' if created else 'actualizada'}; cambio encolado")


@receiver(post_delete, sender=Order)
def broadcast_order_deleted(sender, instance, **kwargs):
    publish_order_change(instance, 'DELETE')
    logger.info(f"Orden {instance.pk} eliminada; cambio encolado")
