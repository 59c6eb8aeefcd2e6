import logging
import secrets
import time
from decimal import Decimal

from django.db import transaction

from store.models import Cart, CartItem, Product, ProductVariation, PrebuiltPC

logger = logging.getLogger(__name__)


class CartService:
    """Cart lookup, mutation and pricing for signed-in users and guest sessions"""

    @staticmethod
    def generate_session_id():
        return f"guest_{int(time.time() * 1000)}_{secrets.token_hex(5)}"

    @staticmethod
    def get_cart(user=None, session_id=None, create=True):
        """
        Resolve the active cart: by user first, then by guest session.

        Returns ``(cart, session_id)``. ``session_id`` is only set for guests and
        is freshly generated when the caller had none.
        """
        if user is not None and user.is_authenticated:
            if create:
                cart, _ = Cart.objects.get_or_create(user=user)
            else:
                cart = Cart.objects.filter(user=user).first()
            return cart, None

        if session_id:
            cart = Cart.objects.filter(session_id=session_id, user__isnull=True).first()
            if cart or not create:
                return cart, session_id
        elif not create:
            return None, None

        session_id = session_id or CartService.generate_session_id()
        cart, _ = Cart.objects.get_or_create(session_id=session_id, user=None)
        return cart, session_id

    @staticmethod
    def _items_queryset(cart):
        return cart.items.select_related(
            'product', 'variation', 'variation__product', 'prebuilt_pc'
        ).prefetch_related('product__images')

    @staticmethod
    def serialize_item(item):
        if item.is_prebuilt:
            pc = item.prebuilt_pc
            price = pc.selling_price
            return {
                'id': item.id,
                'type': 'prebuilt_pc',
                'product_id': None,
                'prebuilt_pc_id': pc.id,
                'variation_id': None,
                'variation_name': None,
                'name': pc.name,
                'slug': pc.slug,
                'price': price,
                'compare_at_price': pc.compare_at_price,
                'image': pc.primary_image or None,
                'quantity': item.quantity,
                'total': price * item.quantity,
                'is_in_stock': pc.is_in_stock,
                'stock_quantity': PrebuiltPC.UNLIMITED_STOCK,
            }

        product = item.product
        image = product.primary_image
        price = item.unit_price
        return {
            'id': item.id,
            'type': 'product',
            'product_id': product.id,
            'prebuilt_pc_id': None,
            'variation_id': item.variation_id,
            'variation_name': item.variation.name if item.variation_id else None,
            'name': product.name,
            'slug': product.slug,
            'price': price,
            'compare_at_price': product.compare_at_price,
            'image': image.url if image else None,
            'quantity': item.quantity,
            'total': price * item.quantity,
            'is_in_stock': product.is_in_stock,
            'stock_quantity': item.variation.stock_quantity if item.variation_id else product.stock_quantity,
        }

    @staticmethod
    def serialize(cart):
        if cart is None:
            return {'id': None, 'items': [], 'subtotal': Decimal('0'), 'total_items': 0}
        items = [CartService.serialize_item(item) for item in CartService._items_queryset(cart)]
        return {
            'id': cart.id,
            'items': items,
            'subtotal': sum((item['total'] for item in items), Decimal('0')),
            'total_items': sum(item['quantity'] for item in items),
        }

    @staticmethod
    def add_item(cart, product_id=None, prebuilt_pc_id=None, variation_id=None, quantity=1):
        if not product_id and not prebuilt_pc_id:
            return False, {"success": False, "error": "Product ID or Prebuilt PC ID is required"}, 400
        if quantity < 1:
            return False, {"success": False, "error": "Quantity must be at least 1"}, 400

        if product_id:
            product = Product.objects.filter(pk=product_id).first()
            if product is None:
                return False, {"success": False, "error": "Product not found"}, 404
            variation = None
            if variation_id:
                variation = ProductVariation.objects.filter(pk=variation_id, product=product).first()
                if variation is None:
                    return False, {"success": False, "error": "Variation not found"}, 404
            lookup = {'product': product, 'variation': variation, 'prebuilt_pc': None}
        else:
            pc = PrebuiltPC.objects.filter(pk=prebuilt_pc_id).first()
            if pc is None:
                return False, {"success": False, "error": "Prebuilt PC not found"}, 404
            lookup = {'product': None, 'variation': None, 'prebuilt_pc': pc}

        with transaction.atomic():
            item = cart.items.select_for_update().filter(**lookup).first()
            if item:
                item.quantity += quantity
                item.save(update_fields=['quantity'])
            else:
                CartItem.objects.create(cart=cart, quantity=quantity, **lookup)
            cart.save(update_fields=['updated_at'])

        return True, {
            "success": True,
            "message": "Item added to cart",
            "data": {'cart': CartService.serialize(cart)},
        }, 200

    @staticmethod
    def update_item(cart, item_id, quantity):
        if not item_id or quantity is None or quantity < 1:
            return False, {"success": False, "error": "Item ID and valid quantity are required"}, 400

        item = cart.items.filter(pk=item_id).first() if cart else None
        if item is None:
            return False, {"success": False, "error": "Cart item not found"}, 404

        item.quantity = quantity
        item.save(update_fields=['quantity'])
        return True, {
            "success": True,
            "message": "Cart updated",
            "data": {'cart': CartService.serialize(cart)},
        }, 200

    @staticmethod
    def remove_item(cart, item_id=None):
        """Remove one line, or empty the cart when no ``item_id`` is given"""
        if cart is None:
            return True, {"success": True, "message": "Cart cleared", "data": {'cart': CartService.serialize(None)}}, 200

        if item_id:
            deleted, _ = cart.items.filter(pk=item_id).delete()
            if not deleted:
                return False, {"success": False, "error": "Cart item not found"}, 404
            message = "Item removed from cart"
        else:
            cart.items.all().delete()
            message = "Cart cleared"

        return True, {"success": True, "message": message, "data": {'cart': CartService.serialize(cart)}}, 200

    @staticmethod
    def clear_for(user=None, session_id=None):
        cart, _ = CartService.get_cart(user=user, session_id=session_id, create=False)
        if cart is not None:
            cart.items.all().delete()

    @staticmethod
    @transaction.atomic
    def merge_guest_cart(user, session_id):
        """Move a guest cart's lines into the user's cart, summing duplicate lines"""
        guest_cart = Cart.objects.filter(session_id=session_id, user__isnull=True).first()
        if guest_cart is None:
            return 0

        user_cart, _ = Cart.objects.get_or_create(user=user)
        merged = 0
        for guest_item in guest_cart.items.all():
            existing = user_cart.items.filter(
                product_id=guest_item.product_id,
                variation_id=guest_item.variation_id,
                prebuilt_pc_id=guest_item.prebuilt_pc_id,
            ).first()
            if existing:
                existing.quantity += guest_item.quantity
                existing.save(update_fields=['quantity'])
            else:
                CartItem.objects.create(
                    cart=user_cart,
                    product_id=guest_item.product_id,
                    variation_id=guest_item.variation_id,
                    prebuilt_pc_id=guest_item.prebuilt_pc_id,
                    quantity=guest_item.quantity,
                )
            merged += 1

        guest_cart.delete()
        logger.info(f"Merged {merged} guest cart line(s) from {session_id} into cart of user {user.pk}")
        return merged
