from django.contrib import admin
from .models import Table


@admin.register(Table)
class TableAdmin(admin.ModelAdmin):
    list_display = ("number", "capacity", "status", "assigned_waiter", "current_order", "location")
    list_filter = ("status", "location")
    search_fields = ("number", "location")
    # Status fields are owned by TableStatusService.
    readonly_fields = ("status", "assigned_waiter", "current_order", "created_at", "updated_at")
