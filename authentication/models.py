import uuid

from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager
from django.utils import timezone
from cloudinary.models import CloudinaryField


# =====================================================
# USER MANAGER
# =====================================================
class UserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('The email field must be set')

        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_verified', True)
        extra_fields.setdefault('role', CustomUser.Role.ADMIN)

        return self.create_user(email, password, **extra_fields)


# =====================================================
# USER MODEL
# =====================================================
class CustomUser(AbstractBaseUser, PermissionsMixin):
    class Role(models.TextChoices):
        ADMIN = 'ADMIN', 'Admin'
        CUSTOMER = 'CUSTOMER', 'Customer'

    class Status(models.TextChoices):
        ACTIVE = 'ACTIVE', 'Active'
        BLOCKED = 'BLOCKED', 'Blocked'

    # Core fields
    uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=150, blank=True)
    phone_number = models.CharField(max_length=15, blank=True, null=True)
    profile_picture = CloudinaryField('image', null=True, blank=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.CUSTOMER)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE, db_index=True)

    # System fields
    is_verified = models.BooleanField(default=False)
    is_phone_verified = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    # Manager
    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.email} ({self.role})"

    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN

    @property
    def is_customer(self):
        return self.role == self.Role.CUSTOMER

    @property
    def is_blocked(self):
        return self.status == self.Status.BLOCKED

    def block(self):
        self.status = self.Status.BLOCKED
        self.save(update_fields=['status', 'updated_at'])

    def unblock(self):
        self.status = self.Status.ACTIVE
        self.save(update_fields=['status', 'updated_at'])


# =====================================================
# ADMIN AUDIT LOG
# =====================================================
class AdminAuditLog(models.Model):
    class Action(models.TextChoices):
        CUSTOMER_BLOCKED = 'CUSTOMER_BLOCKED', 'Customer Blocked'
        CUSTOMER_UNBLOCKED = 'CUSTOMER_UNBLOCKED', 'Customer Unblocked'
        CUSTOMER_UPDATED = 'CUSTOMER_UPDATED', 'Customer Updated'
        ORDER_UPDATED = 'ORDER_UPDATED', 'Order Updated'
        PRODUCT_DELETED = 'PRODUCT_DELETED', 'Product Deleted'
        CATEGORY_DELETED = 'CATEGORY_DELETED', 'Category Deleted'
        SETTINGS_UPDATED = 'SETTINGS_UPDATED', 'Settings Updated'
        MARKETING_EMAIL_SENT = 'MARKETING_EMAIL_SENT', 'Marketing Email Sent'

    admin = models.ForeignKey(
        CustomUser, on_delete=models.SET_NULL, null=True, related_name='audit_logs'
    )
    action = models.CharField(max_length=50, choices=Action.choices)
    target_entity = models.CharField(max_length=50)
    target_id = models.CharField(max_length=100, blank=True)
    reason = models.TextField(blank=True, null=True)
    details = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [models.Index(fields=['target_entity', 'target_id'])]

    def __str__(self):
        return f"{self.action} on {self.target_entity}:{self.target_id}"
