from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings
from django.db import models
from django.db.models import Avg, Count
from django.utils.text import slugify

from authentication.models import CustomUser


def unique_slug(model, value, instance_pk=None, max_length=255):
    """Slugify ``value`` and append a counter until it is unique for ``model``."""
    base_slug = slugify(value)[:max_length] or 'item'
    slug = base_slug
    num = 1
    while model.objects.filter(slug=slug).exclude(pk=instance_pk).exists():
        slug = f"{base_slug}-{num}"
        num += 1
    return slug


# ==========================================
# SEO Fields
# ==========================================
class SEOFields(models.Model):
    """Search/social metadata shared by every public catalogue page."""
    seo_title = models.CharField(max_length=255, blank=True)
    seo_description = models.TextField(blank=True)
    seo_keywords = models.CharField(max_length=500, blank=True, help_text="Comma-separated keywords")
    canonical_url = models.URLField(max_length=500, blank=True)
    robots_index = models.BooleanField(default=True)
    robots_follow = models.BooleanField(default=True)
    og_title = models.CharField(max_length=255, blank=True)
    og_description = models.TextField(blank=True)
    og_image = models.URLField(max_length=500, blank=True)
    twitter_title = models.CharField(max_length=255, blank=True)
    twitter_description = models.TextField(blank=True)
    twitter_image = models.URLField(max_length=500, blank=True)
    json_ld = models.JSONField(null=True, blank=True)
    seo_score = models.PositiveSmallIntegerField(default=0)

    class Meta:
        abstract = True

    @property
    def keyword_list(self):
        return [k.strip() for k in (self.seo_keywords or '').split(',') if k.strip()]


class PublishStatus(models.TextChoices):
    DRAFT = 'DRAFT', 'Draft'
    PUBLISHED = 'PUBLISHED', 'Published'
    ARCHIVED = 'ARCHIVED', 'Archived'


class Visibility(models.TextChoices):
    PUBLIC = 'PUBLIC', 'Public'
    HIDDEN = 'HIDDEN', 'Hidden'


# ==========================================
# Category Model
# ==========================================
class Category(SEOFields):
    """
    Product category. Categories form a tree through ``parent``.
    """
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    description = models.TextField(blank=True)
    parent = models.ForeignKey(
        'self', on_delete=models.SET_NULL, null=True, blank=True, related_name='children'
    )
    image_url = models.URLField(max_length=500, blank=True)
    display_order = models.PositiveIntegerField(default=0)
    is_visible = models.BooleanField(default=True)
    is_featured = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "Categories"
        ordering = ['display_order', 'name']

    def save(self, *args, **kwargs):
        from store.seo import score_category

        if not self.slug:
            self.slug = unique_slug(Category, self.name, self.pk)
        self.seo_score = score_category(self)
        super().save(*args, **kwargs)

    def descendant_ids(self):
        """IDs of this category and every category below it."""
        ids = [self.pk]
        frontier = [self.pk]
        while frontier:
            frontier = list(Category.objects.filter(parent_id__in=frontier).values_list('id', flat=True))
            frontier = [pk for pk in frontier if pk not in ids]
            ids.extend(frontier)
        return ids

    def __str__(self):
        return self.name


class Tag(models.Model):
    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(Tag, self.name, self.pk, max_length=120)
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name


# ==========================================
# Product Model
# ==========================================
class Product(SEOFields):
    Status = PublishStatus
    Visibility = Visibility

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    sku = models.CharField(max_length=100, unique=True, null=True, blank=True)
    brand = models.CharField(max_length=255, blank=True)
    short_description = models.TextField(blank=True)
    description = models.TextField(blank=True)

    price = models.DecimalField(max_digits=10, decimal_places=2)
    compare_at_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    discount_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    stock_quantity = models.PositiveIntegerField(default=0)
    is_in_stock = models.BooleanField(default=True)

    status = models.CharField(max_length=20, choices=PublishStatus.choices, default=PublishStatus.DRAFT, db_index=True)
    visibility = models.CharField(max_length=20, choices=Visibility.choices, default=Visibility.PUBLIC)
    is_featured = models.BooleanField(default=False)

    primary_category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='products')
    tags = models.ManyToManyField(Tag, blank=True, related_name='products')

    rating_avg = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal('0'))
    rating_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [models.Index(fields=['status', 'visibility'])]

    def save(self, *args, **kwargs):
        from store.seo import score_product

        if not self.slug:
            self.slug = unique_slug(Product, self.name, self.pk)
        self.seo_score = score_product(self)
        super().save(*args, **kwargs)

    @property
    def discount_percentage(self):
        if self.compare_at_price and self.compare_at_price > self.price:
            return int(((self.compare_at_price - self.price) / self.compare_at_price * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return 0

    @property
    def is_low_stock(self):
        return 0 < self.stock_quantity <= settings.LOW_STOCK_THRESHOLD

    @property
    def primary_image(self):
        images = list(self.images.all())
        for image in images:
            if image.is_primary:
                return image
        return images[0] if images else None

    def can_fulfil(self, quantity):
        return self.is_in_stock and self.stock_quantity >= quantity

    def refresh_rating(self):
        stats = self.reviews.filter(is_approved=True).aggregate(avg=Avg('rating'), count=Count('id'))
        self.rating_avg = Decimal(str(round(stats['avg'] or 0, 2)))
        self.rating_count = stats['count']
        Product.objects.filter(pk=self.pk).update(rating_avg=self.rating_avg, rating_count=self.rating_count)

    def __str__(self):
        return self.name


class ProductImage(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='images')
    url = models.URLField(max_length=500)
    alt_text = models.CharField(max_length=255, blank=True)
    is_primary = models.BooleanField(default=False)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['-is_primary', 'sort_order', 'id']

    def save(self, *args, **kwargs):
        if self.is_primary:
            ProductImage.objects.filter(product=self.product, is_primary=True).exclude(pk=self.pk).update(is_primary=False)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{'Primary ' if self.is_primary else ''}Image for {self.product.name}"


class ProductSpec(models.Model):
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='specs')
    key = models.CharField(max_length=255)
    value = models.CharField(max_length=1000)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['sort_order', 'id']

    def __str__(self):
        return f"{self.key}: {self.value}"


class ProductVariation(models.Model):
    """A purchasable option of a product, e.g. RAM: 16GB. Price overrides the product price when set."""
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='variations')
    type = models.CharField(max_length=100)
    name = models.CharField(max_length=255)
    sku = models.CharField(max_length=100, unique=True, null=True, blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    stock_quantity = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['type', 'id']

    @property
    def effective_price(self):
        return self.price if self.price is not None else self.product.price

    def __str__(self):
        return f"{self.product.name} - {self.type}: {self.name}"


# ==========================================
# Prebuilt PCs
# ==========================================
class PCType(models.Model):
    name = models.CharField(max_length=100, unique=True)
    slug = models.SlugField(max_length=120, unique=True, blank=True)
    description = models.TextField(blank=True)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['sort_order', 'name']

    def save(self, *args, **kwargs):
        if not self.slug:
            self.slug = unique_slug(PCType, self.name, self.pk, max_length=120)
        super().save(*args, **kwargs)

    def __str__(self):
        return self.name


class PrebuiltPC(SEOFields):
    """A bundle of component products sold as a single SKU."""
    Status = PublishStatus
    Visibility = Visibility

    # Not stock-tracked; assembled to order.
    UNLIMITED_STOCK = 999

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    pc_type = models.ForeignKey(PCType, on_delete=models.SET_NULL, null=True, blank=True, related_name='prebuilt_pcs')
    short_description = models.TextField(blank=True)
    description = models.TextField(blank=True)
    specifications = models.JSONField(default=dict, blank=True)

    total_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0'))
    selling_price = models.DecimalField(max_digits=10, decimal_places=2)
    compare_at_price = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    primary_image = models.URLField(max_length=500, blank=True)
    primary_image_alt = models.CharField(max_length=255, blank=True)
    gallery_images = models.JSONField(default=list, blank=True)

    status = models.CharField(max_length=20, choices=PublishStatus.choices, default=PublishStatus.DRAFT, db_index=True)
    visibility = models.CharField(max_length=20, choices=Visibility.choices, default=Visibility.PUBLIC)
    is_featured = models.BooleanField(default=False)
    is_in_stock = models.BooleanField(default=True)
    tags = models.ManyToManyField(Tag, blank=True, related_name='prebuilt_pcs')

    rating_avg = models.DecimalField(max_digits=3, decimal_places=2, default=Decimal('0'))
    rating_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Prebuilt PC"

    def save(self, *args, **kwargs):
        from store.seo import score_prebuilt_pc

        if not self.slug:
            self.slug = unique_slug(PrebuiltPC, self.name, self.pk)
        self.seo_score = score_prebuilt_pc(self)
        super().save(*args, **kwargs)

    @property
    def discount_percentage(self):
        if self.compare_at_price and self.compare_at_price > self.selling_price:
            return int(((self.compare_at_price - self.selling_price) / self.compare_at_price * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        return 0

    def recalculate_total_price(self):
        total = sum(
            (c.product.price * c.quantity for c in self.components.select_related('product')),
            Decimal('0'),
        )
        self.total_price = total
        PrebuiltPC.objects.filter(pk=self.pk).update(total_price=total)
        return total

    def refresh_rating(self):
        stats = self.reviews.filter(is_approved=True).aggregate(avg=Avg('rating'), count=Count('id'))
        self.rating_avg = Decimal(str(round(stats['avg'] or 0, 2)))
        self.rating_count = stats['count']
        PrebuiltPC.objects.filter(pk=self.pk).update(rating_avg=self.rating_avg, rating_count=self.rating_count)

    def __str__(self):
        return self.name


class PrebuiltPCComponent(models.Model):
    prebuilt_pc = models.ForeignKey(PrebuiltPC, on_delete=models.CASCADE, related_name='components')
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='used_in_prebuilts')
    component_type = models.CharField(max_length=100, blank=True, help_text="e.g. CPU, GPU, RAM")
    quantity = models.PositiveIntegerField(default=1)
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['sort_order', 'id']

    def __str__(self):
        return f"{self.prebuilt_pc.name}: {self.product.name} x{self.quantity}"


# -------------------------------
# Cart & Related Models
# -------------------------------
class Cart(models.Model):
    """Owned by a signed-in user or by an anonymous ``session_id`` cookie."""
    user = models.OneToOneField(CustomUser, on_delete=models.CASCADE, null=True, blank=True, related_name='cart')
    session_id = models.CharField(max_length=100, unique=True, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def subtotal(self):
        return sum((item.line_total for item in self.items.all()), Decimal('0'))

    def __str__(self):
        return f"Cart for {self.user.email if self.user_id else self.session_id}"


class CartItem(models.Model):
    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.CASCADE, null=True, blank=True)
    variation = models.ForeignKey(ProductVariation, on_delete=models.CASCADE, null=True, blank=True)
    prebuilt_pc = models.ForeignKey(PrebuiltPC, on_delete=models.CASCADE, null=True, blank=True)
    quantity = models.PositiveIntegerField(default=1)
    added_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['added_at', 'id']

    @property
    def is_prebuilt(self):
        return self.prebuilt_pc_id is not None

    @property
    def unit_price(self):
        if self.is_prebuilt:
            return self.prebuilt_pc.selling_price
        if self.variation_id:
            return self.variation.effective_price
        return self.product.price

    @property
    def line_total(self):
        return self.unit_price * self.quantity


class Favourite(models.Model):
    customer = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='favourites')
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='favourited_by')
    added_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('customer', 'product')
        ordering = ['-added_at']

    def __str__(self):
        return f"{self.customer.full_name or self.customer.email} favourited {self.product.name}"


class Review(models.Model):
    MAX_IMAGES = 5

    product = models.ForeignKey(Product, on_delete=models.CASCADE, null=True, blank=True, related_name='reviews')
    prebuilt_pc = models.ForeignKey(PrebuiltPC, on_delete=models.CASCADE, null=True, blank=True, related_name='reviews')
    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='reviews')
    rating = models.PositiveSmallIntegerField()
    title = models.CharField(max_length=255)
    description = models.TextField()
    images = models.JSONField(default=list, blank=True)
    is_approved = models.BooleanField(default=True)
    is_verified = models.BooleanField(default=False)
    helpful_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    @property
    def target(self):
        return self.product if self.product_id else self.prebuilt_pc

    def __str__(self):
        return f"Review for {self.target} by {self.user.email}"


class ReviewHelpful(models.Model):
    review = models.ForeignKey(Review, on_delete=models.CASCADE, related_name='helpful_votes')
    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='helpful_votes')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ('review', 'user')
