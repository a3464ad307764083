"""
Constantes del módulo de usuarios.
"""

# ============================================================================
# CREDENCIALES
# ============================================================================

MIN_PASSWORD_LENGTH = 6
PASSWORD_COMPLEXITY_PATTERN = r'^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)'

MIN_FULL_NAME_LENGTH = 2
