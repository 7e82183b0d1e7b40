from django.contrib import admin
from .models import Bill, BillItem


class BillItemInline(admin.TabularInline):
    model = BillItem
    extra = 0
    can_delete = False
    readonly_fields = ("name", "quantity", "unit_price", "line_total", "notes")
    fields = readonly_fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display = ("id", "table_number", "total", "payment_method", "payment_status", "created_at")
    list_filter = ("payment_status", "payment_method")
    search_fields = ("id", "customer_name")
    inlines = [BillItemInline]

    def get_readonly_fields(self, request, obj=None):
        # Bills are snapshots; nothing is editable in the admin.
        return [field.name for field in self.model._meta.fields]

    def has_delete_permission(self, request, obj=None):
        return obj is None or not obj.is_paid
