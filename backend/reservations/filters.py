import django_filters
from core_backend.base import BaseFilterSet
from .models import Reservation


class ReservationFilter(BaseFilterSet):
    date = django_filters.DateFilter(field_name="date")
    table = django_filters.NumberFilter(field_name="table")
    status = django_filters.ChoiceFilter(choices=Reservation.ReservationStatus.choices)

    class Meta:
        model = Reservation
        fields = ["date", "status"]
