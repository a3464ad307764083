"""
Tests de autenticación

Cubre:
- Registro con creación automática del perfil worker
- Login JWT con rol y nombre en la respuesta
- Verificación de email
- Cambio y reset de contraseña
"""
from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import default_token_generator
from django.core.cache import cache
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_encode
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from users.models import Profile
from users.tokens import email_verification_token

User = get_user_model()


def uid_for(user):
    return urlsafe_base64_encode(force_bytes(user.pk))


# ============================================================================
# REGISTRO Y LOGIN
# ============================================================================

class RegistrationTests(APITestCase):

    def setUp(self):
        cache.clear()
        self.url = '/api/auth/register/'
        self.payload = {
            'email': 'nuevo@test.com',
            'password': 'Segura123',
            'confirm_password': 'Segura123',
            'full_name': 'Ana Torres',
        }

    def test_register_creates_worker_profile(self):
        """El registro crea usuario y perfil con rol worker"""
        response = self.client.post(self.url, self.payload)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['email'], 'nuevo@test.com')
        self.assertNotIn('password', response.data)

        user = User.objects.get(email='nuevo@test.com')
        self.assertFalse(user.email_verified)
        self.assertEqual(user.profile.role, Profile.Role.WORKER)
        self.assertEqual(user.profile.full_name, 'Ana Torres')

    def test_register_password_mismatch(self):
        self.payload['confirm_password'] = 'Otra1234'
        response = self.client.post(self.url, self.payload)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('confirm_password', response.data)

    def test_register_weak_password(self):
        """Contraseña sin mayúscula ni número es rechazada"""
        self.payload['password'] = self.payload['confirm_password'] = 'simple'
        response = self.client.post(self.url, self.payload)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data)

    def test_register_short_password(self):
        self.payload['password'] = self.payload['confirm_password'] = 'Ab1'
        response = self.client.post(self.url, self.payload)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_register_duplicate_email(self):
        User.objects.create_user(email='nuevo@test.com', password='Segura123')
        response = self.client.post(self.url, self.payload)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_register_short_full_name(self):
        self.payload['full_name'] = ' A '
        response = self.client.post(self.url, self.payload)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('full_name', response.data)


class LoginTests(APITestCase):

    def setUp(self):
        cache.clear()
        self.url = '/api/auth/login/'
        self.user = User.objects.create_user(
            email='worker@test.com',
            password='Segura123',
            full_name='Carlos García'
        )

    def test_login_returns_tokens_and_role(self):
        response = self.client.post(self.url, {'email': 'worker@test.com', 'password': 'Segura123'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['role'], Profile.Role.WORKER)
        self.assertEqual(response.data['full_name'], 'Carlos García')
        self.assertFalse(response.data['email_verified'])

        token = AccessToken(response.data['access'])
        self.assertEqual(token['email'], 'worker@test.com')

    def test_login_wrong_password(self):
        response = self.client.post(self.url, {'email': 'worker@test.com', 'password': 'Incorrecta1'})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_superuser_logs_in_as_admin(self):
        User.objects.create_superuser(email='root@test.com', password='Segura123')
        response = self.client.post(self.url, {'email': 'root@test.com', 'password': 'Segura123'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], Profile.Role.ADMIN)

    def test_profile_created_on_login_when_missing(self):
        """Usuarios sin perfil lo obtienen al iniciar sesión"""
        Profile.objects.filter(user=self.user).delete()

        response = self.client.post(self.url, {'email': 'worker@test.com', 'password': 'Segura123'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(Profile.objects.filter(user=self.user, role=Profile.Role.WORKER).exists())


# ============================================================================
# VERIFICACIÓN DE EMAIL
# ============================================================================

class EmailVerificationTests(APITestCase):

    def setUp(self):
        cache.clear()
        self.url = '/api/auth/verify-email/'
        self.user = User.objects.create_user(email='verify@test.com', password='Segura123')

    def test_verify_email(self):
        token = email_verification_token.make_token(self.user)
        response = self.client.post(self.url, {'uid': uid_for(self.user), 'token': token})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.email_verified)

    def test_token_cannot_be_reused(self):
        token = email_verification_token.make_token(self.user)
        self.client.post(self.url, {'uid': uid_for(self.user), 'token': token})
        response = self.client.post(self.url, {'uid': uid_for(self.user), 'token': token})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_invalid_token(self):
        response = self.client.post(self.url, {'uid': uid_for(self.user), 'token': 'invalid-token'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.user.refresh_from_db()
        self.assertFalse(self.user.email_verified)


# ============================================================================
# CONTRASEÑAS
# ============================================================================

class ChangePasswordTests(APITestCase):

    def setUp(self):
        cache.clear()
        self.url = '/api/auth/change-password/'
        self.user = User.objects.create_user(email='pass@test.com', password='Segura123')

    def test_change_password(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.post(self.url, {
            'current_password': 'Segura123',
            'new_password': 'Nueva4567',
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('Nueva4567'))

    def test_wrong_current_password(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.post(self.url, {
            'current_password': 'Incorrecta1',
            'new_password': 'Nueva4567',
        })

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('current_password', response.data)

    def test_requires_authentication(self):
        response = self.client.post(self.url, {
            'current_password': 'Segura123',
            'new_password': 'Nueva4567',
        })
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class PasswordResetTests(APITestCase):

    def setUp(self):
        cache.clear()
        self.request_url = '/api/auth/password-reset/'
        self.confirm_url = '/api/auth/password-reset-confirm/'
        self.user = User.objects.create_user(email='reset@test.com', password='Segura123')

    def test_request_does_not_reveal_unknown_emails(self):
        known = self.client.post(self.request_url, {'email': 'reset@test.com'})
        unknown = self.client.post(self.request_url, {'email': 'nadie@test.com'})

        self.assertEqual(known.status_code, status.HTTP_200_OK)
        self.assertEqual(unknown.status_code, status.HTTP_200_OK)
        self.assertEqual(known.data['detail'], unknown.data['detail'])

    def test_confirm_reset(self):
        response = self.client.post(self.confirm_url, {
            'uid': uid_for(self.user),
            'token': default_token_generator.make_token(self.user),
            'new_password': 'Nueva4567',
            'confirm_password': 'Nueva4567',
        })

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('Nueva4567'))

    def test_confirm_with_invalid_token(self):
        response = self.client.post(self.confirm_url, {
            'uid': uid_for(self.user),
            'token': 'bad-token',
            'new_password': 'Nueva4567',
            'confirm_password': 'Nueva4567',
        })

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('Segura123'))
