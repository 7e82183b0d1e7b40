from django.contrib import admin
from .models import Feedback


@admin.register(Feedback)
class FeedbackAdmin(admin.ModelAdmin):
    list_display = ("customer_name", "rating", "status", "created_at")
    list_filter = ("status", "rating")
    search_fields = ("customer_name", "customer_email", "comment")
