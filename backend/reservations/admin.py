from django.contrib import admin
from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ("customer_name", "table", "date", "start_time", "end_time", "guests", "status")
    list_filter = ("status", "date")
    search_fields = ("customer_name", "customer_email", "customer_phone")
    date_hierarchy = "date"
    readonly_fields = ("created_at", "updated_at", "cancelled_at")
