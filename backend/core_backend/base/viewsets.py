from rest_framework import viewsets, filters
from django_filters.rest_framework import DjangoFilterBackend
from ..pagination import StandardPagination


class BaseViewSet(viewsets.ModelViewSet):
    """
    Base ViewSet that provides standard configuration for all ModelViewSets.

    Features:
    - Standard pagination, filtering, and ordering
    - Engine errors rendered by core_backend.exceptions.restaurant_exception_handler

    Usage:
        class MenuItemViewSet(BaseViewSet):
            queryset = MenuItem.objects.all()
            serializer_class = MenuItemSerializer
    """

    pagination_class = StandardPagination

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]

    ordering = ['-id']


class ReadOnlyBaseViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Base ViewSet for read-only endpoints.
    """

    pagination_class = StandardPagination
    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]
    ordering = ['-id']
