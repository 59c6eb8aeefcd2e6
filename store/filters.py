import django_filters
from django.conf import settings
from django.db.models import Q

from .models import Product, PublishStatus


class AdminProductFilter(django_filters.FilterSet):
    search = django_filters.CharFilter(method='filter_search')
    status = django_filters.CharFilter(method='filter_status')
    category = django_filters.NumberFilter(field_name='primary_category_id')
    stock = django_filters.ChoiceFilter(
        method='filter_stock',
        choices=[('in_stock', 'In stock'), ('low_stock', 'Low stock'), ('out_of_stock', 'Out of stock')],
    )
    featured = django_filters.BooleanFilter(field_name='is_featured')

    class Meta:
        model = Product
        fields = ['search', 'status', 'category', 'stock', 'featured']

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(name__icontains=value) | Q(sku__icontains=value) | Q(brand__icontains=value))

    def filter_status(self, queryset, name, value):
        value = value.upper()
        if value not in PublishStatus.values:
            return queryset
        return queryset.filter(status=value)

    def filter_stock(self, queryset, name, value):
        if value == 'out_of_stock':
            return queryset.filter(stock_quantity=0)
        if value == 'low_stock':
            return queryset.filter(stock_quantity__gt=0, stock_quantity__lte=settings.LOW_STOCK_THRESHOLD)
        return queryset.filter(stock_quantity__gt=0)
