import logging
import traceback
from django.utils import timezone
from django.core.cache import cache
from django.contrib.auth import authenticate
from django.db import transaction
from rest_framework_simplejwt.tokens import RefreshToken, TokenError

from authentication.serializers import UserBaseSerializer
from authentication.core.jwt_utils import TokenManager
from authentication.core.ip_utils import get_client_ip
from authentication.models import CustomUser

logger = logging.getLogger(__name__)

MAX_FAILED_LOGINS = 5
LOCKOUT_SECONDS = 900


class AuthenticationService:
    """Service class to handle authentication-related business logic"""

    @staticmethod
    def register(email, password, full_name, phone_number=None, request_meta=None, cart_session_id=None):
        """Create a CUSTOMER account and sign it in"""
        if request_meta:
            logger.info(f"Registration attempt from IP: {get_client_ip(request_meta)}")

        email = email.strip().lower()
        if CustomUser.objects.filter(email=email).exists():
            return False, {"success": False, "error": "Email already registered"}, 400

        try:
            with transaction.atomic():
                user = CustomUser.objects.create_user(
                    email=email,
                    password=password,
                    full_name=full_name.strip(),
                    phone_number=phone_number or None,
                    role=CustomUser.Role.CUSTOMER,
                )
        except Exception as e:
            logger.error(f"Registration error: {str(e)}")
            return False, {"success": False, "error": "Registration failed. Please try again"}, 500

        AuthenticationService._merge_guest_cart(user, cart_session_id)
        tokens = TokenManager.generate_tokens(user)
        logger.info(f"Registration successful for user: {user.email}")

        return True, {
            "success": True,
            "message": "Registration successful",
            "data": {
                'user': UserBaseSerializer(user).data,
                'tokens': tokens,
                'is_new_user': True,
            }
        }, 201

    @staticmethod
    def login(email, password, request_meta=None, cart_session_id=None):
        """Handle user login with email and password"""
        if not email or not password:
            return False, {"success": False, "error": "Email and password are required"}, 400

        email = email.strip().lower()
        if request_meta:
            logger.info(
                f"Login attempt from IP: {get_client_ip(request_meta)}, User-agent: {request_meta.get('HTTP_USER_AGENT')}"
            )

        if cache.get(f"account_lockout:{email}"):
            logger.warning(f"Login attempt for locked account: {email}")
            return False, {
                "success": False,
                "error": "Account temporarily locked due to multiple failed attempts. Try again later.",
                "error_code": "account_locked",
            }, 403

        user = authenticate(username=email, password=password)
        if not user:
            failed_attempts = cache.get(f"failed_logins:{email}", 0) + 1
            cache.set(f"failed_logins:{email}", failed_attempts, timeout=1800)

            if failed_attempts >= MAX_FAILED_LOGINS:
                cache.set(f"account_lockout:{email}", True, timeout=LOCKOUT_SECONDS)
                logger.warning(f"Account locked due to failed attempts: {email}")

            logger.warning(f"Failed login attempt for email: {email}")
            return False, {"success": False, "error": "Invalid email or password"}, 401

        if user.is_blocked:
            logger.warning(f"Login attempt for blocked account: {email}")
            return False, {
                "success": False,
                "error": "Your account has been blocked",
                "error_code": "account_blocked",
            }, 403

        cache.delete(f"failed_logins:{email}")

        try:
            tokens = TokenManager.generate_tokens(user)
        except Exception as token_error:
            logger.error(f"Token generation error: {str(token_error)}")
            logger.error(traceback.format_exc())
            return False, {"success": False, "error": "Token generation failed."}, 500

        user.last_login = timezone.now()
        user.save(update_fields=['last_login'])

        AuthenticationService._merge_guest_cart(user, cart_session_id)
        logger.info(f"Login successful for user: {user.email}")

        return True, {
            "success": True,
            "message": "Login successful",
            "data": {
                'user': UserBaseSerializer(user).data,
                'tokens': tokens,
            }
        }, 200

    @staticmethod
    def refresh_token(refresh_token):
        """Exchange a refresh token for a new token pair"""
        if not refresh_token:
            return False, {"success": False, "error": "Refresh token is required"}, 400

        try:
            tokens = TokenManager.refresh_tokens(refresh_token)
        except TokenError:
            return False, {"success": False, "error": "Invalid or expired refresh token"}, 401
        return True, {"success": True, "data": {'tokens': tokens}}, 200

    @staticmethod
    def logout(user, access_jti=None, refresh_token=None):
        """Revoke the current access token and, when given, the refresh token"""
        blacklisted_count = 0
        if access_jti and TokenManager.blacklist_token(access_jti):
            blacklisted_count += 1

        if refresh_token:
            try:
                jti = RefreshToken(refresh_token).get('jti')
                if TokenManager.blacklist_token(jti):
                    blacklisted_count += 1
            except Exception as e:
                logger.warning(f"Error blacklisting refresh token during logout: {str(e)}")

        logger.info(f"User logged out: {getattr(user, 'pk', None)} ({blacklisted_count} token(s) blacklisted)")
        return True, {"success": True, "message": "Logged out successfully"}, 200

    @staticmethod
    def _merge_guest_cart(user, cart_session_id):
        if not cart_session_id:
            return
        from store.cart_service import CartService
        try:
            CartService.merge_guest_cart(user, cart_session_id)
        except Exception as e:
            logger.error(f"Failed to merge guest cart {cart_session_id} into user {user.pk}: {str(e)}")
