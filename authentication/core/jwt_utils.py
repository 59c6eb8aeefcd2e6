from rest_framework_simplejwt.tokens import RefreshToken, TokenError
from datetime import timedelta
from django.conf import settings
from django.core.cache import cache
import logging
import uuid
import time

logger = logging.getLogger(__name__)


class TokenManager:
    """JWT token manager keyed on the user UUID, with cache-backed blacklisting"""

    BLACKLIST_PREFIX = "blacklisted_token"
    USER_TOKENS_PREFIX = "user_tokens"

    @staticmethod
    def generate_tokens(user):
        """Generate access and refresh tokens with the custom claims the API relies on"""
        try:
            refresh = RefreshToken.for_user(user)

            jti = str(uuid.uuid4())

            # Custom claims
            refresh['jti'] = jti
            refresh['email'] = user.email
            refresh['role'] = user.role
            refresh['is_verified'] = user.is_verified
            refresh['user_uuid'] = str(user.uuid)

            access_token = refresh.access_token
            access_jti = str(uuid.uuid4())
            access_token['jti'] = access_jti
            access_token['user_uuid'] = str(user.uuid)

            access_expiry = settings.SIMPLE_JWT.get('ACCESS_TOKEN_LIFETIME', timedelta(days=7))
            refresh_expiry = settings.SIMPLE_JWT.get('REFRESH_TOKEN_LIFETIME', timedelta(days=14))

            TokenManager._store_token_metadata(
                str(user.uuid), [jti, access_jti], refresh_expiry.total_seconds()
            )

            return {
                'access_token': str(access_token),
                'refresh_token': str(refresh),
                'token_type': 'Bearer',
                'expires_in': int(access_expiry.total_seconds()),
                'refresh_expires_in': int(refresh_expiry.total_seconds()),
                'user_uuid': str(user.uuid),
                'issued_at': int(time.time())
            }

        except Exception as e:
            logger.error(f"Failed to generate tokens for user {user.email}: {str(e)}")
            raise

    @staticmethod
    def refresh_tokens(refresh_token):
        """Rotate a refresh token into a fresh token pair"""
        from authentication.models import CustomUser

        try:
            token = RefreshToken(refresh_token)
        except TokenError as e:
            logger.warning(f"Token refresh error: {str(e)}")
            raise

        jti = token.get('jti')
        if not jti or TokenManager.is_token_blacklisted(jti):
            logger.warning(f"Attempt to use blacklisted token with JTI: {jti}")
            raise TokenError("Token is blacklisted")

        user_uuid = token.get('user_uuid')
        if not user_uuid:
            raise TokenError("Invalid token payload: missing user_uuid")

        try:
            user = CustomUser.objects.get(uuid=user_uuid)
        except CustomUser.DoesNotExist:
            logger.warning(f"Token refresh attempted for non-existent user UUID: {user_uuid}")
            raise TokenError("Invalid token")

        if not user.is_active or user.is_blocked:
            logger.warning(f"Token refresh attempted for inactive or blocked user: {user.email}")
            TokenManager.blacklist_token(jti)
            raise TokenError("User is inactive")

        if settings.SIMPLE_JWT.get('ROTATE_REFRESH_TOKENS', True):
            TokenManager.blacklist_token(jti)

        return TokenManager.generate_tokens(user)

    @staticmethod
    def blacklist_token(jti):
        """Blacklist a token by JTI"""
        if not jti:
            return False
        timeout = settings.SIMPLE_JWT.get('BLACKLIST_TIMEOUT', 86400)
        cache.set(f"{TokenManager.BLACKLIST_PREFIX}:{jti}", True, timeout=timeout)
        return True

    @staticmethod
    def is_token_blacklisted(jti):
        if not jti:
            return False
        return bool(cache.get(f"{TokenManager.BLACKLIST_PREFIX}:{jti}"))

    @staticmethod
    def _store_token_metadata(user_uuid, jtis, expiry_seconds):
        """Remember issued JTIs per user so they can all be revoked at once"""
        key = f"{TokenManager.USER_TOKENS_PREFIX}:{user_uuid}"
        active = set(cache.get(key, []))
        active.update(jtis)
        cache.set(key, list(active), timeout=int(expiry_seconds))

    @staticmethod
    def blacklist_all_user_tokens(user_uuid):
        """Blacklist every token issued to a user; used when an account is blocked"""
        key = f"{TokenManager.USER_TOKENS_PREFIX}:{user_uuid}"
        active_tokens = cache.get(key, [])
        for jti in active_tokens:
            TokenManager.blacklist_token(jti)
        cache.delete(key)
        if active_tokens:
            logger.info(f"Blacklisted {len(active_tokens)} tokens for user {user_uuid}")
        return len(active_tokens)
