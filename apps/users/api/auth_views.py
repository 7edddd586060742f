"""
Cookie based JWT authentication.

Login, signup and refresh put the simplejwt tokens into HTTPOnly cookies
instead of the response body; ``core.authentication.JWTCookieAuthentication``
reads the ``access_token`` cookie back on every request. Logout clears them.

These views run without authentication classes so an expired or mangled
access cookie never blocks a login, refresh or logout.
"""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.exceptions import TokenError
from django.contrib.auth import authenticate
from django.middleware.csrf import get_token
from django.conf import settings
from django.views.decorators.csrf import csrf_exempt
from django.utils.decorators import method_decorator
from django.utils.translation import gettext_lazy as _

from core.exceptions import UnauthenticatedError, ValidationFailed
from .serializers import FestUserSerializer, SignupSerializer

import logging

logger = logging.getLogger(__name__)

ACCESS_COOKIE = 'access_token'
REFRESH_COOKIE = 'refresh_token'
CSRF_COOKIE = 'csrftoken'
CSRF_COOKIE_MAX_AGE = 31449600  # 1 year


def _cookie_options(httponly=True):
    # 'None' is required for cross-origin requests with credentials
    return {
        'httponly': httponly,
        'secure': not settings.DEBUG,
        'samesite': 'None' if not settings.DEBUG else 'Lax',
        'path': '/',
    }


def _lifetime(key):
    return int(settings.SIMPLE_JWT[key].total_seconds())


def _set_access_cookie(response, refresh):
    response.set_cookie(
        key=ACCESS_COOKIE,
        value=str(refresh.access_token),
        max_age=_lifetime('ACCESS_TOKEN_LIFETIME'),
        **_cookie_options(),
    )


def _set_refresh_cookie(response, refresh):
    response.set_cookie(
        key=REFRESH_COOKIE,
        value=str(refresh),
        max_age=_lifetime('REFRESH_TOKEN_LIFETIME'),
        **_cookie_options(),
    )


def sign_in(request, response, user):
    """
    Issue a fresh token pair for ``user`` and attach it to ``response``.

    Also sets a script-readable CSRF cookie for clients that send the
    X-CSRFToken header.
    """
    refresh = RefreshToken.for_user(user)
    _set_access_cookie(response, refresh)
    _set_refresh_cookie(response, refresh)
    response.set_cookie(
        key=CSRF_COOKIE,
        value=get_token(request),
        max_age=CSRF_COOKIE_MAX_AGE,
        **_cookie_options(httponly=False),
    )
    return response


@method_decorator(csrf_exempt, name='dispatch')
class SecureTokenObtainView(APIView):
    """
    Email/password login that sets the JWT pair in HTTPOnly cookies.
    CSRF exempt because no session exists yet at login time.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        email = (request.data.get('email') or '').strip().lower()
        password = request.data.get('password')

        if not email or not password:
            raise ValidationFailed(_('Email and password are required'))

        user = authenticate(request, email=email, password=password)
        if user is None:
            logger.info(f"Failed login for {email}")
            raise UnauthenticatedError(_('Invalid credentials'))

        response = Response({
            'user': FestUserSerializer(user).data,
            'message': _('Login successful'),
        }, status=status.HTTP_200_OK)
        return sign_in(request, response, user)


@method_decorator(csrf_exempt, name='dispatch')
class SignupView(APIView):
    """
    Create a participant account and sign it in straight away.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"New user signed up: {user.email}")

        response = Response({
            'user': FestUserSerializer(user).data,
            'message': _('Signup successful'),
        }, status=status.HTTP_201_CREATED)
        return sign_in(request, response, user)


@method_decorator(csrf_exempt, name='dispatch')
class SecureTokenRefreshView(APIView):
    """
    Read the refresh token from its HTTPOnly cookie and set a new access
    cookie. The refresh token itself is rotated when ROTATE_REFRESH_TOKENS is on.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        refresh_token = request.COOKIES.get(REFRESH_COOKIE)
        if not refresh_token:
            raise UnauthenticatedError(_('Refresh token not found'))

        try:
            refresh = RefreshToken(refresh_token)
        except TokenError:
            raise UnauthenticatedError(_('Invalid or expired refresh token'))

        response = Response({'message': _('Token refreshed successfully')}, status=status.HTTP_200_OK)
        _set_access_cookie(response, refresh)

        if settings.SIMPLE_JWT.get('ROTATE_REFRESH_TOKENS', False):
            refresh.set_jti()
            refresh.set_exp()
            refresh.set_iat()
            _set_refresh_cookie(response, refresh)

        return response


@method_decorator(csrf_exempt, name='dispatch')
class SecureLogoutView(APIView):
    """
    Clear the auth cookies. Works with an expired access token, so no
    authentication is required.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        response = Response({'message': _('Logout successful')}, status=status.HTTP_200_OK)

        # set_cookie with max_age=0 deletes more reliably than delete_cookie across browsers
        expired = {'value': '', 'max_age': 0, 'expires': 'Thu, 01 Jan 1970 00:00:00 GMT'}
        response.set_cookie(ACCESS_COOKIE, **expired, **_cookie_options())
        response.set_cookie(REFRESH_COOKIE, **expired, **_cookie_options())
        response.set_cookie(CSRF_COOKIE, **expired, **_cookie_options(httponly=False))
        return response


class CurrentUserView(APIView):
    """
    Profile of the signed in user.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({'user': FestUserSerializer(request.user).data}, status=status.HTTP_200_OK)
