"""
Validadores de credenciales.

Reglas de contraseña de la aplicación: mínimo 6 caracteres con al menos una
mayúscula, una minúscula y un número.
"""
import re

from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _
from django.utils.deconstruct import deconstructible

from .constants import MIN_PASSWORD_LENGTH, PASSWORD_COMPLEXITY_PATTERN


@deconstructible
class PasswordComplexityValidator:
    """
    Compatible con AUTH_PASSWORD_VALIDATORS y usable directamente desde
    los serializers.
    """

    pattern = re.compile(PASSWORD_COMPLEXITY_PATTERN)

    def validate(self, password, user=None):
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                _("The password must be at least %(min)d characters long.") % {'min': MIN_PASSWORD_LENGTH},
                code='password_too_short',
            )
        if not self.pattern.match(password):
            raise ValidationError(
                _("The password must contain an uppercase letter, a lowercase letter and a number."),
                code='password_too_simple',
            )

    def __call__(self, password):
        self.validate(password)

    def get_help_text(self):
        return _("Your password must contain an uppercase letter, a lowercase letter and a number.")


validate_password_complexity = PasswordComplexityValidator()
