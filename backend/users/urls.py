from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import StaffViewSet

app_name = "users"

router = DefaultRouter()
router.register(r"staff", StaffViewSet, basename="staff")

urlpatterns = [
    path("", include(router.urls)),
]
