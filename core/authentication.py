"""
JWT authentication that reads the access token from an HTTPOnly cookie and
falls back to the standard Authorization header.
"""

from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import InvalidToken, AuthenticationFailed


class JWTCookieAuthentication(JWTAuthentication):
    """
    Custom JWT authentication that reads the access token from the
    ``access_token`` cookie. The cookie is set by the views in
    ``apps.users.api.auth_views``. Clients that cannot hold cookies send the
    same token as ``Authorization: Bearer <token>`` instead.

    CORS-Safe Design:
    - Returns None when no token present (allows anonymous access)
    - Does not add WWW-Authenticate header (handled by exception handler)
    """

    def authenticate(self, request):
        """
        Authenticate the request using the JWT from the cookie or header.

        Returns:
            None: No token present, user is anonymous
            tuple: (user, token) if authentication succeeds

        Raises:
            AuthenticationFailed: If token is invalid
        """
        # a cleared cookie can still arrive as an empty value
        raw_token = request.COOKIES.get('access_token') or None

        if raw_token is None:
            header = self.get_header(request)
            if header is None:
                return None
            raw_token = self.get_raw_token(header)
            if raw_token is None:
                return None

        try:
            validated_token = self.get_validated_token(raw_token)
        except (InvalidToken, AuthenticationFailed):
            raise AuthenticationFailed('Invalid or expired token')

        return self.get_user(validated_token), validated_token

    def authenticate_header(self, request):
        # keep 401 responses free of WWW-Authenticate
        return None
