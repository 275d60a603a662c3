import django_filters
from django.db.models import Q

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    """Predicate composition for the filtered product listing.

    Every filter is optional and all supplied filters are ANDed.  Price
    bounds are inclusive.  ``search`` matches name OR description.
    """

    search = django_filters.CharFilter(method="filter_search")
    category = django_filters.NumberFilter(field_name="category", lookup_expr="exact")
    min_wholesale_price = django_filters.NumberFilter(
        field_name="wholesale_price", lookup_expr="gte"
    )
    max_wholesale_price = django_filters.NumberFilter(
        field_name="wholesale_price", lookup_expr="lte"
    )
    min_retail_price = django_filters.NumberFilter(
        field_name="retail_price", lookup_expr="gte"
    )
    max_retail_price = django_filters.NumberFilter(
        field_name="retail_price", lookup_expr="lte"
    )
    quantity = django_filters.NumberFilter(field_name="quantity", lookup_expr="exact")

    class Meta:
        model = Product
        fields = ["category", "quantity"]

    def filter_search(self, queryset, name, value):
        return queryset.filter(
            Q(name__icontains=value) | Q(description__icontains=value)
        )
