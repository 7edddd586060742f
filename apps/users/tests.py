from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.users.models import FestUser
from core.testing import PERSONAL_INFO, make_user


class SimpleTest(TestCase):
    def test_homepage_status_code(self):
        # ReDoc is served at the site root
        response = self.client.get('/')
        self.assertEqual(response.status_code, 200)

    def test_health_check(self):
        response = self.client.get(reverse('health-check'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})


class FestUserManagerTests(TestCase):

    def test_create_user_normalises_email(self):
        user = FestUser.objects.create_user(email="Priya@Example.COM", password="pw", first_name=" Priya ")

        self.assertEqual(user.email, "priya@example.com")
        self.assertEqual(user.first_name, "Priya")
        self.assertEqual(user.role, FestUser.GlobalRole.PARTICIPANT)
        self.assertTrue(user.check_password("pw"))

    def test_required_fields(self):
        with self.assertRaises(ValueError):
            FestUser.objects.create_user(email="", password="pw", first_name="Priya")
        with self.assertRaises(ValueError):
            FestUser.objects.create_user(email="priya@example.com", password="pw")

    def test_create_superuser_is_superadmin(self):
        user = FestUser.objects.create_superuser(email="root@example.com", password="pw", first_name="Root")

        self.assertTrue(user.is_staff)
        self.assertTrue(user.is_superuser)
        self.assertTrue(user.is_superadmin)
        self.assertTrue(user.is_platform_admin)

    def test_apply_personal_info(self):
        user = make_user("priya@example.com")

        user.apply_personal_info({"city": "Mumbai", "institute_name": "IIT Bombay"})

        user.refresh_from_db()
        self.assertEqual(user.city, "Mumbai")
        self.assertEqual(user.institute_name, "IIT Bombay")
        self.assertIsNone(user.phone)


class FestUserApiTests(APITestCase):

    def setUp(self):
        self.participant = make_user("priya@example.com")
        self.admin = make_user("admin@example.com", role="admin")
        self.superadmin = make_user("root@example.com", role="superadmin")

    def test_me(self):
        self.client.force_authenticate(self.participant)

        response = self.client.get(reverse('festuser-self'))
        self.assertEqual(response.data["email"], "priya@example.com")

        response = self.client.patch(
            reverse('festuser-self'),
            {"city": PERSONAL_INFO["city"], "role": "superadmin", "email": "evil@example.com"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.participant.refresh_from_db()
        self.assertEqual(self.participant.city, "Pune")
        self.assertEqual(self.participant.role, "participant")
        self.assertEqual(self.participant.email, "priya@example.com")

    def test_directory_is_for_platform_admins(self):
        self.client.force_authenticate(self.participant)
        self.assertEqual(self.client.get(reverse('festuser-list')).status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(self.admin)
        response = self.client.get(reverse('festuser-list'), {"role": "superadmin"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["email"] for row in response.data["results"]], ["root@example.com"])

    def test_set_role_is_superadmin_only(self):
        url = reverse('festuser-set-role', kwargs={"pk": self.participant.pk})

        self.client.force_authenticate(self.admin)
        self.assertEqual(
            self.client.post(url, {"role": "festival_head"}, format="json").status_code,
            status.HTTP_403_FORBIDDEN,
        )

        self.client.force_authenticate(self.superadmin)
        response = self.client.post(url, {"role": "festival_head"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["role"], "festival_head")

        response = self.client.post(url, {"role": "emperor"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"]["code"], "invalid")

    def test_choices(self):
        self.client.force_authenticate(self.participant)

        response = self.client.get(reverse('festuser-choices'))

        self.assertIn({"value": "Female", "label": "Female"}, response.data["gender"])


class CookieAuthTests(APITestCase):

    def setUp(self):
        self.user = make_user("priya@example.com")

    def login(self, email="priya@example.com", password="s3cret-pass!"):
        return self.client.post(reverse('auth-token'), {"email": email, "password": password}, format="json")

    def test_login_sets_cookies_that_authenticate_later_requests(self):
        response = self.login(email="Priya@Example.com")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["user"]["email"], "priya@example.com")
        self.assertNotIn("access", response.data)
        self.assertTrue(response.cookies['access_token'].value)
        self.assertTrue(response.cookies['access_token']['httponly'])
        self.assertTrue(response.cookies['refresh_token']['httponly'])
        self.assertFalse(response.cookies['csrftoken']['httponly'])

        response = self.client.get(reverse('auth-me'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["user"]["email"], "priya@example.com")
        self.assertEqual(self.client.get(reverse('festuser-self')).status_code, status.HTTP_200_OK)

    def test_bad_credentials(self):
        response = self.login(password="wrong-pass")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"]["code"], "unauthenticated")
        self.assertNotIn('access_token', response.cookies)
        self.assertNotIn('WWW-Authenticate', response)

        response = self.client.post(reverse('auth-token'), {"email": "priya@example.com"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_inactive_user_cannot_log_in(self):
        self.user.is_active = False
        self.user.save()

        self.assertEqual(self.login().status_code, status.HTTP_401_UNAUTHORIZED)

    def test_stale_access_cookie_does_not_block_login(self):
        self.client.cookies['access_token'] = "not-a-jwt"

        self.assertEqual(self.login().status_code, status.HTTP_200_OK)

    def test_access_token_also_works_as_bearer_header(self):
        token = self.login().cookies['access_token'].value
        self.client.cookies.clear()

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.get(reverse('auth-me'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_refresh_rotates_tokens_from_cookie(self):
        first = self.login()

        response = self.client.post(reverse('auth-token-refresh'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertNotEqual(response.cookies['access_token'].value, first.cookies['access_token'].value)
        self.assertNotEqual(response.cookies['refresh_token'].value, first.cookies['refresh_token'].value)
        self.assertEqual(self.client.get(reverse('auth-me')).status_code, status.HTTP_200_OK)

    def test_refresh_without_valid_cookie(self):
        response = self.client.post(reverse('auth-token-refresh'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"]["message"], "Refresh token not found")

        self.client.cookies['refresh_token'] = "garbage"
        response = self.client.post(reverse('auth-token-refresh'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"]["message"], "Invalid or expired refresh token")

    def test_logout_clears_cookies(self):
        self.login()

        response = self.client.post(reverse('auth-logout'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        for name in ('access_token', 'refresh_token', 'csrftoken'):
            self.assertEqual(response.cookies[name].value, "")
            self.assertEqual(response.cookies[name]['max-age'], 0)
        self.assertEqual(self.client.get(reverse('auth-me')).status_code, status.HTTP_403_FORBIDDEN)


class SignupTests(APITestCase):

    def signup(self, **overrides):
        payload = {
            "email": "Neha@Example.com",
            "password": "lantern-orbit-42",
            "first_name": "Neha",
            "last_name": "Rao",
        }
        payload.update(overrides)
        return self.client.post(reverse('auth-signup'), payload, format="json")

    def test_signup_creates_participant_and_signs_in(self):
        response = self.signup(role="superadmin")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["user"]["email"], "neha@example.com")
        self.assertNotIn("password", response.data["user"])

        user = FestUser.objects.get(email="neha@example.com")
        self.assertEqual(user.role, FestUser.GlobalRole.PARTICIPANT)
        self.assertTrue(user.check_password("lantern-orbit-42"))

        self.assertTrue(response.cookies['access_token'].value)
        self.assertEqual(self.client.get(reverse('auth-me')).data["user"]["full_name"], "Neha Rao")

    def test_email_taken_in_any_case(self):
        make_user("neha@example.com")

        response = self.signup()

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.data["error"]["details"])
        self.assertEqual(FestUser.objects.count(), 1)

    def test_weak_password_and_missing_name(self):
        response = self.signup(password="12345678")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password", response.data["error"]["details"])

        response = self.signup(first_name="")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("first_name", response.data["error"]["details"])
        self.assertFalse(FestUser.objects.exists())
