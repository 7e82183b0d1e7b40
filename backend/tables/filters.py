import django_filters
from core_backend.base import BaseFilterSet, CharInFilter
from .models import Table


class TableFilter(BaseFilterSet):
    status = CharInFilter(field_name="status", lookup_expr="in")
    min_capacity = django_filters.NumberFilter(field_name="capacity", lookup_expr="gte")
    waiter = django_filters.NumberFilter(field_name="assigned_waiter")

    class Meta:
        model = Table
        fields = ["status", "location"]
