import django_filters

from modules.products.models import ProductModel
from modules.products.value_objects import ProductSize


class ProductFilter(django_filters.FilterSet):
    category = django_filters.UUIDFilter(field_name="category_id")
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    size = django_filters.CharFilter(method="filter_size")

    class Meta:
        model = ProductModel
        fields = ["category", "name", "min_price", "max_price", "size"]

    def filter_size(self, queryset, name, value):
        # Raises InvalidSize for values outside the catalog.
        size = ProductSize.from_value(value)
        return queryset.filter(variants__size=size.value).distinct()
