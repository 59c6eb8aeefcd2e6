from rest_framework import serializers

from .models import Address


# =====================================================
# ADDRESS BOOK
# =====================================================
class AddressSerializer(serializers.ModelSerializer):
    label = serializers.CharField(max_length=50, required=False, default='Home',
                                  error_messages={'max_length': 'Label must be less than 50 characters'})
    full_name = serializers.CharField(
        min_length=2, max_length=100,
        error_messages={
            'required': 'Full name is required',
            'blank': 'Full name is required',
            'min_length': 'Name must be at least 2 characters',
            'max_length': 'Name must be less than 100 characters',
        },
    )
    mobile = serializers.RegexField(
        r'^[6-9]\d{9}$',
        error_messages={
            'required': 'Mobile number is required',
            'invalid': 'Please enter a valid 10-digit mobile number',
        },
    )
    address_line1 = serializers.CharField(
        min_length=10, max_length=200,
        error_messages={
            'required': 'Address is required',
            'blank': 'Address is required',
            'min_length': 'Please enter a complete address',
            'max_length': 'Address must be less than 200 characters',
        },
    )
    address_line2 = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)
    landmark = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    city = serializers.CharField(
        min_length=2, max_length=100,
        error_messages={
            'required': 'City is required',
            'min_length': 'City name must be at least 2 characters',
        },
    )
    state = serializers.CharField(
        min_length=2, max_length=100,
        error_messages={
            'required': 'State is required',
            'min_length': 'State name must be at least 2 characters',
        },
    )
    pincode = serializers.RegexField(
        r'^\d{6}$',
        error_messages={
            'required': 'Pincode is required',
            'invalid': 'Please enter a valid 6-digit pincode',
        },
    )
    country = serializers.CharField(max_length=100, required=False, default='India')
    is_default = serializers.BooleanField(required=False, default=False)

    class Meta:
        model = Address
        fields = [
            'id', 'label', 'full_name', 'mobile', 'address_line1', 'address_line2',
            'landmark', 'city', 'state', 'pincode', 'country', 'is_default',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_address_line2(self, value):
        return value or None

    def validate_landmark(self, value):
        return value or None
