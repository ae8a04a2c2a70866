import logging

from firebase_admin import auth
from django.contrib.auth import get_user_model
from rest_framework import authentication
from rest_framework import exceptions
from .firebase_admin_client import get_app

logger = logging.getLogger(__name__)
User = get_user_model()

class FirebaseAuthentication(authentication.BaseAuthentication):
    """DRF authentication backend validating Firebase ID tokens."""
    keyword = "Bearer"

    def authenticate(self, request):
        """Validate Authorization header token and return (user, auth)."""
        auth_header = request.META.get('HTTP_AUTHORIZATION')
        if not auth_header:
            return None

        parts = auth_header.split()
        if len(parts) != 2 or parts[0] != self.keyword:
            raise exceptions.AuthenticationFailed('Invalid authorization header')
        id_token = parts[1]

        try:
            decoded_token = auth.verify_id_token(id_token, app=get_app())
        except Exception as e:
            logger.info("Firebase token rejected: %s", e)
            raise exceptions.AuthenticationFailed('Invalid Firebase token')

        user = self._user_for(decoded_token)
        if user is None or user.is_deleted or not user.is_active:
            raise exceptions.AuthenticationFailed('User not found')
        return (user, decoded_token)

    def _user_for(self, decoded_token):
        uid = decoded_token.get("uid")
        email = decoded_token.get("email")
        user = User.objects.filter(firebase_uid=uid).first() if uid else None
        if user is None and email:
            user = User.objects.filter(email__iexact=email).first()
        return user

    def authenticate_header(self, request):
        """Makes DRF answer 401 rather than 403 for anonymous requests."""
        return f'{self.keyword} realm="api"'
