"""
URL configuration for core_backend project.

Each app registers its own router; app URLconfs are mounted under /api/.
"""

from django.conf import settings
from django.contrib import admin
from django.urls import path, include
from django.conf.urls.static import static
from django.http import JsonResponse


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    path("admin/", admin.site.urls),
    path("api/users/", include("users.urls")),
    path("api/menu/", include("menu.urls")),
    # These apps register their base endpoint themselves ("tables", "orders", ...),
    # so they are mounted at "api/" to avoid double-prefixing.
    path("api/", include("tables.urls")),
    path("api/", include("reservations.urls")),
    path("api/", include("orders.urls")),
    path("api/billing/", include("billing.urls")),
    path("api/", include("feedback.urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.STATIC_URL, document_root=settings.STATIC_ROOT)
