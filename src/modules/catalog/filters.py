import django_filters

from modules.catalog.models import CatalogProduct, ProductCategory


class CatalogProductFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    category = django_filters.ChoiceFilter(choices=ProductCategory.choices)

    class Meta:
        model = CatalogProduct
        fields = ["name", "category"]
