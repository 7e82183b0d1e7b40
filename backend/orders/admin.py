from django.contrib import admin
from .models import Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("menu_item", "name", "quantity", "price_at_sale", "notes", "get_line_item_total")
    fields = readonly_fields
    can_delete = False

    def get_line_item_total(self, obj):
        return f"${obj.line_total:,.2f}"

    get_line_item_total.short_description = "Line Item Total"

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Read-mostly view of orders. Status changes go through the lifecycle service.
    """

    list_display = ("id", "table", "status", "assigned_waiter", "chef_name", "created_at")
    list_filter = ("status",)
    search_fields = ("id", "customer_name")
    readonly_fields = (
        "status",
        "table",
        "assigned_waiter",
        "assigned_chef",
        "chef_name",
        "estimated_prep_minutes",
        "start_time",
        "created_at",
        "updated_at",
        "ready_at",
        "served_at",
        "paid_at",
    )
    inlines = [OrderItemInline]
