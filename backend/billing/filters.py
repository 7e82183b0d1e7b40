import django_filters
from core_backend.base import BaseFilterSet
from .models import Bill


class BillFilter(BaseFilterSet):
    order = django_filters.UUIDFilter(field_name="order")
    table = django_filters.NumberFilter(field_name="table_number")

    class Meta:
        model = Bill
        fields = ["payment_status", "payment_method"]
