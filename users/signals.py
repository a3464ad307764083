from django.db.models.signals import post_save
from django.dispatch import receiver
from django.contrib.auth import get_user_model
from .models import Profile
from .session import DEFAULT_FULL_NAME
import logging

User = get_user_model()
logger = logging.getLogger(__name__)


@receiver(post_save, sender=User)
def create_profile(sender, instance, created, **kwargs):
    """
    Crea automáticamente el Profile cuando se registra un usuario.

    Los superusuarios reciben el rol ``admin``; el resto empieza como ``worker``.
    Usuarios sin perfil (p. ej. creados con bulk_create) lo obtienen de forma
    perezosa en ``resolve_session``.
    """
    if not created:
        return

    role = Profile.Role.ADMIN if instance.is_superuser else Profile.Role.WORKER
    Profile.objects.get_or_create(
        user=instance,
        defaults={
            'email': instance.email,
            'full_name': instance.full_name or DEFAULT_FULL_NAME,
            'role': role,
        }
    )
    logger.info(f"Profile creado automáticamente para {instance.email} ({role})")


@receiver(post_save, sender=User)
def sync_profile_email(sender, instance, created, update_fields=None, **kwargs):
    """Mantiene el email del Profile alineado con el de la identidad."""
    if created or (update_fields and 'email' not in update_fields):
        return

    updated = Profile.objects.filter(user=instance).exclude(
        email=instance.email
    ).update(email=instance.email)
    if updated:
        logger.info(f"Profile email sincronizado para usuario {instance.pk}")
