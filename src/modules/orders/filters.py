import django_filters

from modules.orders.constants import OrderStatus, OrderType
from modules.orders.dtos import OrderFilterDTO
from modules.orders.models import Order
from modules.orders.repositories.django_repository import apply_order_filters


class OrderFilter(django_filters.FilterSet):
    """Parses the order-list query string.

    Matching itself is done by ``apply_order_filters`` so the list, the
    exports and the service share one definition.
    """

    status = django_filters.ChoiceFilter(choices=OrderStatus.choices)
    marketplace = django_filters.CharFilter()
    order_type = django_filters.ChoiceFilter(choices=OrderType.choices)
    start_date = django_filters.DateFilter()
    end_date = django_filters.DateFilter()
    only_custom = django_filters.BooleanFilter()
    urgent = django_filters.BooleanFilter()
    search = django_filters.CharFilter()

    class Meta:
        model = Order
        fields = [
            "status",
            "marketplace",
            "order_type",
            "start_date",
            "end_date",
            "only_custom",
            "urgent",
            "search",
        ]

    def to_dto(self) -> OrderFilterDTO:
        data = {
            key: value
            for key, value in self.form.cleaned_data.items()
            if value not in (None, "")
        }
        return OrderFilterDTO(**data)

    def filter_queryset(self, queryset):
        return apply_order_filters(queryset, self.to_dto())
