from decimal import Decimal
from io import StringIO

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase

from users.notification_models import AdminNotification
from .cart_service import CartService
from .models import (
    Category, Product, ProductImage, ProductVariation, PCType, PrebuiltPC, Cart, CartItem, Favourite, Review,
    PublishStatus, Visibility,
)
from .seo import score_category, score_product


def make_product(category, **kwargs):
    fields = {
        'name': 'Ryzen 5 7600',
        'sku': 'R5-7600',
        'price': Decimal('18000.00'),
        'stock_quantity': 20,
        'primary_category': category,
        'status': PublishStatus.PUBLISHED,
    }
    fields.update(kwargs)
    return Product.objects.create(**fields)


class CatalogueTests(APITestCase):
    def setUp(self):
        self.cpus = Category.objects.create(name='Processors', slug='processors')
        self.amd = Category.objects.create(name='AMD Processors', slug='amd-processors', parent=self.cpus)
        self.gpus = Category.objects.create(name='Graphics Cards', slug='graphics-cards')
        self.ryzen = make_product(self.amd, brand='AMD')
        self.rtx = make_product(
            self.gpus, name='RTX 4060', sku='RTX-4060', brand='NVIDIA', price=Decimal('30000.00'), is_featured=True,
        )
        make_product(self.gpus, name='Draft GPU', sku='DRAFT-GPU', status=PublishStatus.DRAFT)
        make_product(self.gpus, name='Hidden GPU', sku='HIDDEN-GPU', visibility=Visibility.HIDDEN)

    def test_only_live_products_are_listed(self):
        resp = self.client.get('/api/store/products/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        names = [p['name'] for p in resp.data['data']['products']]
        self.assertEqual(names, ['RTX 4060', 'Ryzen 5 7600'])
        self.assertEqual(resp.data['data']['pagination']['total'], 2)
        self.assertEqual(resp.data['data']['filters']['brands'], ['AMD', 'NVIDIA'])

    def test_category_filter_includes_subcategories(self):
        resp = self.client.get('/api/store/products/', {'category': 'processors'})
        self.assertEqual([p['name'] for p in resp.data['data']['products']], ['Ryzen 5 7600'])

        resp = self.client.get('/api/store/products/', {'category': 'missing'})
        self.assertEqual(resp.data['data']['products'], [])

    def test_price_filter_and_sort(self):
        resp = self.client.get('/api/store/products/', {'max_price': '20000', 'sort_by': 'price-high'})
        self.assertEqual([p['name'] for p in resp.data['data']['products']], ['Ryzen 5 7600'])

        resp = self.client.get('/api/store/products/', {'sort_by': 'price-low', 'min_price': 'abc'})
        self.assertEqual([p['name'] for p in resp.data['data']['products']], ['Ryzen 5 7600', 'RTX 4060'])

    def test_product_detail(self):
        resp = self.client.get(f'/api/store/products/{self.rtx.slug}/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['product']['sku'], 'RTX-4060')
        self.assertEqual(resp.data['data']['related_products'], [])

        resp = self.client.get('/api/store/products/draft-gpu/')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data['error'], 'Product not found')

    def test_category_tree_and_breadcrumbs(self):
        resp = self.client.get('/api/store/categories/')
        tree = {node['slug']: node for node in resp.data['data']}
        self.assertEqual(set(tree), {'processors', 'graphics-cards'})
        self.assertEqual(tree['processors']['children'][0]['slug'], 'amd-processors')
        self.assertEqual(tree['graphics-cards']['product_count'], 1)

        resp = self.client.get('/api/store/categories/amd-processors/')
        self.assertEqual(
            [crumb['slug'] for crumb in resp.data['data']['breadcrumbs']], ['processors', 'amd-processors']
        )

    def test_prebuilt_pc_listing(self):
        gaming = PCType.objects.create(name='Gaming PC')
        PrebuiltPC.objects.create(
            name='Raptor 4060', selling_price=Decimal('85000.00'), pc_type=gaming, status=PublishStatus.PUBLISHED,
        )
        PrebuiltPC.objects.create(name='Office Basic', selling_price=Decimal('25000.00'))

        resp = self.client.get('/api/store/prebuilt-pcs/', {'pc_type': 'gaming-pc'})
        self.assertEqual([pc['name'] for pc in resp.data['data']['prebuilt_pcs']], ['Raptor 4060'])
        self.assertEqual(resp.data['data']['pc_types'][0]['slug'], 'gaming-pc')

        resp = self.client.get('/api/store/prebuilt-pcs/office-basic/')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)


class CartTests(APITestCase):
    def setUp(self):
        category = Category.objects.create(name='Memory', slug='memory')
        self.ram = make_product(category, name='DDR5 16GB', sku='DDR5-16', price=Decimal('5000.00'))
        self.variation = ProductVariation.objects.create(
            product=self.ram, type='Capacity', name='32GB', price=Decimal('9500.00'), stock_quantity=4,
        )
        self.pc = PrebuiltPC.objects.create(name='Raptor 4060', selling_price=Decimal('85000.00'))

    def test_guest_cart_issues_cookie_and_merges_lines(self):
        resp = self.client.post('/api/store/cart/', {'product_id': self.ram.id, 'quantity': 2}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertIn(settings.CART_COOKIE_NAME, resp.cookies)
        self.assertIn('no-cache', resp['Cache-Control'])

        resp = self.client.post('/api/store/cart/', {'product_id': self.ram.id, 'quantity': 1}, format='json')
        cart = resp.data['data']['cart']
        self.assertEqual(len(cart['items']), 1)
        self.assertEqual(cart['items'][0]['quantity'], 3)
        self.assertEqual(cart['subtotal'], Decimal('15000.00'))

    def test_variation_and_prebuilt_lines(self):
        self.client.post('/api/store/cart/', {
            'product_id': self.ram.id, 'variation_id': self.variation.id, 'quantity': 1,
        }, format='json')
        resp = self.client.post('/api/store/cart/', {'prebuilt_pc_id': self.pc.id}, format='json')
        cart = resp.data['data']['cart']
        self.assertEqual(cart['total_items'], 2)
        self.assertEqual(cart['subtotal'], Decimal('94500.00'))
        types = {item['type']: item for item in cart['items']}
        self.assertEqual(types['product']['variation_name'], '32GB')
        self.assertEqual(types['prebuilt_pc']['stock_quantity'], PrebuiltPC.UNLIMITED_STOCK)

    def test_add_errors(self):
        resp = self.client.post('/api/store/cart/', {}, format='json')
        self.assertEqual(resp.data['error'], 'Product ID or Prebuilt PC ID is required')
        resp = self.client.post('/api/store/cart/', {'product_id': self.ram.id, 'quantity': 0}, format='json')
        self.assertEqual(resp.data['error'], 'Quantity must be at least 1')
        resp = self.client.post('/api/store/cart/', {'product_id': 9999}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_and_remove(self):
        resp = self.client.post('/api/store/cart/', {'product_id': self.ram.id}, format='json')
        item_id = resp.data['data']['cart']['items'][0]['id']

        resp = self.client.put('/api/store/cart/', {'item_id': item_id, 'quantity': 4}, format='json')
        self.assertEqual(resp.data['data']['cart']['items'][0]['quantity'], 4)

        resp = self.client.put('/api/store/cart/', {'item_id': item_id, 'quantity': 0}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        resp = self.client.delete(f'/api/store/cart/?item_id={item_id}')
        self.assertEqual(resp.data['message'], 'Item removed from cart')
        self.assertEqual(resp.data['data']['cart']['items'], [])

    def test_empty_cart_without_session(self):
        resp = self.client.get('/api/store/cart/')
        self.assertEqual(resp.data['data']['cart']['items'], [])
        self.assertFalse(Cart.objects.exists())

    def test_merge_guest_cart_into_user_cart(self):
        user = get_user_model().objects.create_user(email='cust@example.com', password='pass12345')
        user_cart = Cart.objects.create(user=user)
        CartItem.objects.create(cart=user_cart, product=self.ram, quantity=1)
        guest_cart = Cart.objects.create(session_id='guest_1')
        CartItem.objects.create(cart=guest_cart, product=self.ram, quantity=2)
        CartItem.objects.create(cart=guest_cart, prebuilt_pc=self.pc, quantity=1)

        merged = CartService.merge_guest_cart(user, 'guest_1')

        self.assertEqual(merged, 2)
        self.assertFalse(Cart.objects.filter(session_id='guest_1').exists())
        self.assertEqual(user_cart.items.get(product=self.ram).quantity, 3)
        self.assertEqual(user_cart.items.count(), 2)


class FavouriteAndReviewTests(APITestCase):
    def setUp(self):
        User = get_user_model()
        self.customer = User.objects.create_user(email='cust@example.com', password='pass12345', full_name='Ravi')
        self.other = User.objects.create_user(email='other@example.com', password='pass12345')
        category = Category.objects.create(name='Monitors', slug='monitors')
        self.monitor = make_product(category, name='27in IPS', sku='MON-27')

    def test_wishlist_requires_login(self):
        resp = self.client.get('/api/store/favourites/')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_wishlist_add_and_remove(self):
        self.client.force_authenticate(user=self.customer)
        resp = self.client.post('/api/store/favourites/', {'product_id': self.monitor.id}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        resp = self.client.post('/api/store/favourites/', {'product_id': self.monitor.id}, format='json')
        self.assertEqual(resp.data['message'], 'Already in wishlist')

        resp = self.client.delete(f'/api/store/favourites/{self.monitor.id}/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertFalse(Favourite.objects.exists())
        resp = self.client.delete(f'/api/store/favourites/{self.monitor.id}/')
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_review_updates_rating_and_notifies(self):
        self.client.force_authenticate(user=self.customer)
        resp = self.client.post('/api/store/reviews/', {
            'product_id': self.monitor.id, 'rating': 4, 'title': 'Sharp panel', 'description': 'No dead pixels',
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)

        self.monitor.refresh_from_db()
        self.assertEqual(self.monitor.rating_count, 1)
        self.assertEqual(self.monitor.rating_avg, Decimal('4.00'))
        self.assertTrue(AdminNotification.objects.filter(type=AdminNotification.Type.NEW_REVIEW).exists())

    def test_review_validation(self):
        self.client.force_authenticate(user=self.customer)
        resp = self.client.post('/api/store/reviews/', {'product_id': self.monitor.id, 'rating': 4}, format='json')
        self.assertEqual(resp.data['error'], 'Title, description, and rating are required')
        resp = self.client.post('/api/store/reviews/', {
            'product_id': self.monitor.id, 'rating': 7, 'title': 'x', 'description': 'y',
        }, format='json')
        self.assertEqual(resp.data['error'], 'Rating must be between 1 and 5')

    def test_review_listing_and_helpful_toggle(self):
        review = Review.objects.create(
            product=self.monitor, user=self.customer, rating=5, title='Great', description='Love it',
        )
        Review.objects.create(
            product=self.monitor, user=self.other, rating=3, title='Okay', description='Fine', is_approved=False,
        )

        resp = self.client.get('/api/store/reviews/', {'product_id': self.monitor.id})
        analytics = resp.data['data']['analytics']
        self.assertEqual(analytics['total_reviews'], 1)
        self.assertEqual(analytics['distribution'][0], {'stars': 5, 'count': 1, 'percentage': 100})

        resp = self.client.get('/api/store/reviews/')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        self.client.force_authenticate(user=self.other)
        resp = self.client.post(f'/api/store/reviews/{review.id}/helpful/')
        self.assertEqual(resp.data['data'], {'voted': True, 'helpful_count': 1})
        resp = self.client.post(f'/api/store/reviews/{review.id}/helpful/')
        self.assertEqual(resp.data['data'], {'voted': False, 'helpful_count': 0})


class AdminCatalogueTests(APITestCase):
    def setUp(self):
        User = get_user_model()
        self.admin = User.objects.create_superuser(email='admin@test.com', password='pass12345')
        self.client.force_authenticate(user=self.admin)
        self.category = Category.objects.create(name='Storage', slug='storage')

    def test_customers_are_rejected(self):
        customer = get_user_model().objects.create_user(email='c@test.com', password='pass12345')
        self.client.force_authenticate(user=customer)
        resp = self.client.get('/api/admin/products/')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_create_product_with_nested_rows(self):
        resp = self.client.post('/api/admin/products/', {
            'name': 'Samsung 990 Pro 1TB',
            'slug': 'samsung-990-pro-1tb',
            'sku': 'SS-990-1TB',
            'price': '11999.00',
            'stock_quantity': 10,
            'primary_category_id': self.category.id,
            'images': [{'url': 'https://cdn.example.com/990.jpg', 'alt_text': '990 Pro', 'is_primary': True}],
            'specs': [{'key': 'Interface', 'value': 'PCIe 4.0 x4'}],
            'tags': ['nvme', 'samsung'],
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        product = Product.objects.get(sku='SS-990-1TB')
        self.assertEqual(product.images.count(), 1)
        self.assertEqual(product.specs.get().value, 'PCIe 4.0 x4')
        self.assertEqual(sorted(product.tags.values_list('name', flat=True)), ['nvme', 'samsung'])

    def test_create_product_requires_fields_and_unique_sku(self):
        resp = self.client.post('/api/admin/products/', {'name': 'No price'}, format='json')
        self.assertEqual(resp.data['error'], 'Name, slug, primary category and price are required')

        make_product(self.category, sku='DUP-1')
        resp = self.client.post('/api/admin/products/', {
            'name': 'Dup', 'slug': 'dup', 'sku': 'DUP-1', 'price': '10.00', 'primary_category_id': self.category.id,
        }, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error'], 'A product with this SKU already exists')

    def test_sku_is_optional(self):
        for slug, sku in (('no-sku-1', None), ('no-sku-2', '')):
            payload = {'name': slug, 'slug': slug, 'price': '499.00', 'primary_category_id': self.category.id}
            if sku is not None:
                payload['sku'] = sku
            resp = self.client.post('/api/admin/products/', payload, format='json')
            self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
            self.assertIsNone(resp.data['data']['sku'])
        self.assertEqual(Product.objects.filter(sku__isnull=True).count(), 2)

    def test_duplicate_category_slug_rejected(self):
        resp = self.client.post('/api/admin/categories/', {'name': 'Storage Drives', 'slug': 'storage'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error'], 'A category with this slug already exists')
        self.assertEqual(Category.objects.filter(slug='storage').count(), 1)

        other = Category.objects.create(name='Memory', slug='memory')
        resp = self.client.patch(f'/api/admin/categories/{other.id}/', {'slug': 'storage'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error'], 'A category with this slug already exists')

        resp = self.client.patch(f'/api/admin/categories/{self.category.id}/', {'slug': 'storage'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

    def test_stock_filter_and_stats(self):
        make_product(self.category, sku='LOW', stock_quantity=2)
        make_product(self.category, sku='OUT', name='Gone', stock_quantity=0)
        resp = self.client.get('/api/admin/products/', {'stock': 'low_stock'})
        self.assertEqual([p['sku'] for p in resp.data['data']['products']], ['LOW'])
        stats = resp.data['data']['stats']
        self.assertEqual((stats['total'], stats['low_stock'], stats['out_of_stock']), (2, 1, 1))

    def test_category_delete_rules(self):
        child = Category.objects.create(name='NVMe SSD', slug='nvme-ssd', parent=self.category)
        make_product(child)
        resp = self.client.delete(f'/api/admin/categories/{child.id}/')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

        resp = self.client.delete(f'/api/admin/categories/{self.category.id}/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        child.refresh_from_db()
        self.assertIsNone(child.parent)

    def test_category_cannot_move_under_own_child(self):
        child = Category.objects.create(name='NVMe SSD', slug='nvme-ssd', parent=self.category)
        resp = self.client.patch(f'/api/admin/categories/{self.category.id}/', {'parent': child.id}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data['error'], 'Category cannot be moved under its own subcategory')

    def test_review_moderation_refreshes_rating(self):
        product = make_product(self.category)
        customer = get_user_model().objects.create_user(email='c@test.com', password='pass12345')
        review = Review.objects.create(product=product, user=customer, rating=2, title='Meh', description='Slow')
        product.refresh_rating()

        resp = self.client.post(f'/api/admin/reviews/{review.id}/', {'action': 'reject'}, format='json')
        self.assertEqual(resp.data['message'], 'Review rejected')
        product.refresh_from_db()
        self.assertEqual(product.rating_count, 0)

        resp = self.client.post(f'/api/admin/reviews/{review.id}/', {'action': 'hide'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)


class LowStockSignalTests(TestCase):
    def setUp(self):
        self.category = Category.objects.create(name='Cooling', slug='cooling')

    def low_stock_alerts(self):
        return AdminNotification.objects.filter(type=AdminNotification.Type.LOW_STOCK)

    def test_alert_when_stock_drops_into_threshold(self):
        product = make_product(self.category, stock_quantity=20)
        self.assertFalse(self.low_stock_alerts().exists())

        product.stock_quantity = 3
        product.save()
        self.assertEqual(self.low_stock_alerts().count(), 1)

        # Unchanged stock does not raise another alert.
        product.name = 'Renamed cooler'
        product.save()
        self.assertEqual(self.low_stock_alerts().count(), 1)

    def test_no_alert_when_out_of_stock(self):
        product = make_product(self.category, stock_quantity=20)
        product.stock_quantity = 0
        product.save()
        self.assertFalse(self.low_stock_alerts().exists())


class SEOScoreTests(TestCase):
    def test_category_score(self):
        category = Category(name='Processors', slug='processors')
        self.assertEqual(score_category(category), 0)

        category.seo_title = 'Buy Processors Online | Sai Computer Bazar'
        category.seo_keywords = 'cpu, processor'
        category.image_url = 'https://cdn.example.com/cpu.jpg'
        self.assertEqual(score_category(category), 50)

    def test_product_score_counts_image_alt_text(self):
        category = Category.objects.create(name='Processors', slug='processors')
        product = make_product(category, seo_title='Short', seo_keywords='ryzen')
        self.assertEqual(product.seo_score, 25)

        ProductImage.objects.create(product=product, url='https://cdn.example.com/r5.jpg', alt_text='Ryzen 5')
        self.assertEqual(score_product(product), 40)


class SeedCategoriesCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        call_command('init_default_categories', stdout=StringIO())
        count = Category.objects.count()
        self.assertTrue(Category.objects.filter(slug='graphics-cards', parent__isnull=True).exists())
        self.assertEqual(
            Category.objects.get(slug='processors').seo_title, 'Processors | Sai Computer Bazar'
        )
        self.assertEqual(PCType.objects.count(), 8)

        call_command('init_default_categories', stdout=StringIO())
        self.assertEqual(Category.objects.count(), count)
