from decimal import Decimal

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework import status
from rest_framework.test import APITestCase

from store.models import Category, Product, Cart, CartItem, PublishStatus
from .core.jwt_utils import TokenManager
from .models import AdminAuditLog

User = get_user_model()


class RegistrationTests(APITestCase):
    def setUp(self):
        cache.clear()

    def test_register_returns_tokens_and_sets_cookie(self):
        response = self.client.post('/api/auth/register/', {
            'full_name': 'Asha Patil',
            'email': 'Asha@Example.com',
            'password': 'secret123',
            'confirm_password': 'secret123',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['message'], 'Registration successful')
        self.assertTrue(response.data['data']['is_new_user'])
        self.assertEqual(response.data['data']['user']['email'], 'asha@example.com')
        self.assertIn('access_token', response.data['data']['tokens'])
        self.assertIn(settings.AUTH_COOKIE_NAME, response.cookies)
        self.assertTrue(User.objects.filter(email='asha@example.com', role=User.Role.CUSTOMER).exists())

    def test_duplicate_email_rejected(self):
        User.objects.create_user(email='taken@example.com', password='secret123')
        response = self.client.post('/api/auth/register/', {
            'full_name': 'Someone',
            'email': 'taken@example.com',
            'password': 'secret123',
            'confirm_password': 'secret123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Email already registered')

    def test_validation_messages(self):
        payload = {'full_name': 'Asha', 'email': 'not-an-email', 'password': 'secret123', 'confirm_password': 'secret123'}
        response = self.client.post('/api/auth/register/', payload, format='json')
        self.assertEqual(response.data['error'], 'Invalid email address')

        payload.update(email='asha@example.com', password='abc', confirm_password='abc')
        response = self.client.post('/api/auth/register/', payload, format='json')
        self.assertEqual(response.data['error'], 'Password must be at least 6 characters')

        payload.update(password='secret123', confirm_password='secret124')
        response = self.client.post('/api/auth/register/', payload, format='json')
        self.assertEqual(response.data['error'], 'Passwords do not match')


class LoginTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.user = User.objects.create_user(email='ravi@example.com', password='secret123', full_name='Ravi')

    def login(self, password='secret123', email='ravi@example.com'):
        return self.client.post('/api/auth/login/', {'email': email, 'password': password}, format='json')

    def test_login_success(self):
        response = self.login()
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Login successful')
        self.assertIn(settings.AUTH_COOKIE_NAME, response.cookies)
        self.user.refresh_from_db()
        self.assertIsNotNone(self.user.last_login)

    def test_missing_and_wrong_credentials(self):
        response = self.client.post('/api/auth/login/', {'email': 'ravi@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Email and password are required')

        response = self.login(password='wrong-pass')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['error'], 'Invalid email or password')

    def test_lockout_after_repeated_failures(self):
        for _ in range(5):
            self.login(password='wrong-pass')

        response = self.login()
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error_code'], 'account_locked')

    def test_blocked_user_cannot_login(self):
        self.user.block()
        response = self.login()
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['error'], 'Your account has been blocked')
        self.assertEqual(response.data['error_code'], 'account_blocked')

    def test_guest_cart_merged_on_login(self):
        category = Category.objects.create(name='Memory', slug='memory')
        ram = Product.objects.create(
            name='DDR5 16GB', sku='DDR5-16', price=Decimal('4500.00'), stock_quantity=10,
            primary_category=category, status=PublishStatus.PUBLISHED,
        )
        user_cart = Cart.objects.create(user=self.user)
        CartItem.objects.create(cart=user_cart, product=ram, quantity=1)
        guest_cart = Cart.objects.create(session_id='guest-123')
        CartItem.objects.create(cart=guest_cart, product=ram, quantity=2)

        self.client.cookies[settings.CART_COOKIE_NAME] = 'guest-123'
        response = self.login()

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Cart.objects.filter(session_id='guest-123').exists())
        self.assertEqual(user_cart.items.get().quantity, 3)
        self.assertEqual(response.cookies[settings.CART_COOKIE_NAME].value, '')


class SessionTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.user = User.objects.create_user(email='meera@example.com', password='secret123', full_name='Meera')
        self.tokens = TokenManager.generate_tokens(self.user)

    def test_me_for_guest_and_signed_in_user(self):
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['success'])
        self.assertIsNone(response.data['data']['user'])

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {self.tokens['access_token']}")
        response = self.client.get('/api/auth/me/')
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['data']['user']['name'], 'Meera')

    def test_auth_cookie_is_accepted(self):
        self.client.cookies[settings.AUTH_COOKIE_NAME] = self.tokens['access_token']
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.data['data']['user']['email'], 'meera@example.com')

    def test_refresh(self):
        response = self.client.post('/api/auth/token/refresh/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Refresh token is required')

        response = self.client.post(
            '/api/auth/token/refresh/', {'refresh_token': self.tokens['refresh_token']}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('refresh_token', response.data['data']['tokens'])

        # rotated tokens cannot be reused
        response = self.client.post(
            '/api/auth/token/refresh/', {'refresh_token': self.tokens['refresh_token']}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_revokes_access_token(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {self.tokens['access_token']}")
        response = self.client.post(
            '/api/auth/logout/', {'refresh_token': self.tokens['refresh_token']}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Logged out successfully')

        response = self.client.get('/api/account/addresses/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AdminCustomerTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.admin = User.objects.create_superuser(email='admin@example.com', password='secret123')
        self.customer = User.objects.create_user(
            email='kiran@example.com', password='secret123', full_name='Kiran', phone_number='9812345678'
        )
        User.objects.create_user(email='zoya@example.com', password='secret123', full_name='Zoya')
        self.client.force_authenticate(user=self.admin)

    def test_list_search_and_stats(self):
        response = self.client.get('/api/admin/customers/', {'search': 'kiran'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        customers = response.data['data']['customers']
        self.assertEqual([c['email'] for c in customers], ['kiran@example.com'])
        self.assertEqual(customers[0]['order_count'], 0)

        response = self.client.get('/api/admin/customers/stats/')
        self.assertEqual(response.data['data']['total'], 2)
        self.assertEqual(response.data['data']['blocked'], 0)

    def test_list_is_paginated_by_page_and_limit(self):
        response = self.client.get('/api/admin/customers/', {'page': 2, 'limit': 1})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        data = response.data['data']
        self.assertEqual(data['pagination'], {'total': 2, 'page': 2, 'limit': 1, 'total_pages': 2})
        self.assertEqual(len(data['customers']), 1)

        response = self.client.get('/api/admin/customers/', {'page': 99, 'limit': 1})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['pagination']['page'], 2)

        response = self.client.get('/api/admin/customers/', {'page': 'abc', 'limit': 'abc'})
        self.assertEqual(response.data['data']['pagination']['page'], 1)
        self.assertEqual(response.data['data']['pagination']['limit'], 20)

        response = self.client.get('/api/admin/customers/', {'limit': 500})
        self.assertEqual(response.data['data']['pagination']['limit'], 100)

    def test_block_and_unblock(self):
        url = f'/api/admin/customers/{self.customer.uuid}/block/'

        response = self.client.post(url, {'action': 'block', 'reason': 'Chargeback abuse'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.customer.refresh_from_db()
        self.assertTrue(self.customer.is_blocked)
        log = AdminAuditLog.objects.get(action=AdminAuditLog.Action.CUSTOMER_BLOCKED)
        self.assertEqual(log.reason, 'Chargeback abuse')

        response = self.client.get('/api/admin/customers/', {'status': 'blocked'})
        self.assertEqual(len(response.data['data']['customers']), 1)

        response = self.client.post(url, {'action': 'unblock'}, format='json')
        self.customer.refresh_from_db()
        self.assertFalse(self.customer.is_blocked)

        response = self.client.post(url, {'action': 'delete'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_blocked_token_is_rejected(self):
        tokens = TokenManager.generate_tokens(self.customer)
        self.client.post(f'/api/admin/customers/{self.customer.uuid}/block/', {'action': 'block'}, format='json')

        self.client.force_authenticate(user=None)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access_token']}")
        response = self.client.get('/api/account/addresses/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_customers_cannot_manage_customers(self):
        self.client.force_authenticate(user=self.customer)
        response = self.client.get('/api/admin/customers/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
