import django_filters
from core_backend.base import BaseFilterSet, CharInFilter
from .models import Order


class OrderFilter(BaseFilterSet):
    """
    ?status=pending,preparing  ?table=5  ?waiter=3  ?chef=4
    """

    status = CharInFilter(field_name="status", lookup_expr="in")
    table = django_filters.NumberFilter(field_name="table")
    waiter = django_filters.NumberFilter(field_name="assigned_waiter")
    chef = django_filters.NumberFilter(field_name="assigned_chef")

    class Meta:
        model = Order
        fields = ["status"]
