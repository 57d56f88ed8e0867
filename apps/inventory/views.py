import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import filters, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from common.auth_backends import ROLE_ADMIN
from common.drf_auth import RolePermission

from . import services
from .filters import InventoryItemFilter
from .models import InventoryItem
from .serializers import (
    InventoryAlertSerializer, InventoryItemCreateSerializer, InventoryItemSerializer,
    RestockSerializer, UsageSerializer
)

logger = logging.getLogger(__name__)


@extend_schema_view(
    list=extend_schema(summary="List Inventory", description="Filter with category, status", tags=['Inventory']),
    retrieve=extend_schema(summary="Get Inventory Item", tags=['Inventory']),
    create=extend_schema(summary="Add Inventory Item", request=InventoryItemCreateSerializer, tags=['Inventory']),
    update=extend_schema(summary="Update Inventory Item", tags=['Inventory']),
    destroy=extend_schema(summary="Delete Inventory Item", tags=['Inventory']),
)
class InventoryItemViewSet(viewsets.ModelViewSet):
    """Stock items, usage, restocking and stock / expiry alerts (admin)."""

    queryset = InventoryItem.objects.prefetch_related('usage', 'restock_history')
    serializer_class = InventoryItemSerializer
    permission_classes = [RolePermission]
    http_method_names = ['get', 'post', 'put', 'delete']
    default_roles = (ROLE_ADMIN,)

    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = InventoryItemFilter
    search_fields = ['item_name', 'item_code', 'manufacturer', 'batch_number']
    ordering_fields = ['item_name', 'quantity', 'expiry_date', 'unit_price']
    ordering = ['item_name']

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        return Response({'success': True, 'items': self.get_serializer(queryset, many=True).data})

    def retrieve(self, request, *args, **kwargs):
        item = services.get_item(kwargs.get('pk'))
        return Response({'success': True, 'item': self.get_serializer(item).data})

    def create(self, request, *args, **kwargs):
        item = services.add_item(request.data)
        return Response({
            'success': True,
            'message': 'Inventory item added successfully',
            'item_code': item.item_code
        })

    def update(self, request, *args, **kwargs):
        item = services.update_item(services.get_item(kwargs.get('pk')), request.data)
        return Response({'success': True, 'message': 'Item updated successfully', 'item': self.get_serializer(item).data})

    def destroy(self, request, *args, **kwargs):
        item = services.get_item(kwargs.get('pk'))
        item_code = item.item_code
        item.delete()
        logger.info(f"Inventory item {item_code} deleted")
        return Response({'success': True, 'message': 'Item deleted successfully'})

    @extend_schema(request=UsageSerializer, tags=['Inventory'])
    @action(detail=True, methods=['post'])
    def usage(self, request, pk=None):
        """Record stock usage; rejected when it exceeds the quantity on hand."""
        services.record_usage(
            pk,
            request.data.get('quantity_used'),
            department=request.data.get('department'),
            purpose=request.data.get('purpose'),
        )
        return Response({'success': True, 'message': 'Usage recorded successfully'})

    @extend_schema(request=RestockSerializer, tags=['Inventory'])
    @action(detail=True, methods=['post'])
    def restock(self, request, pk=None):
        services.restock_item(
            pk,
            request.data.get('quantity'),
            unit_price=request.data.get('unit_price'),
            supplier=request.data.get('supplier'),
            batch_number=request.data.get('batch_number'),
        )
        return Response({'success': True, 'message': 'Item restocked successfully'})

    @action(detail=False, methods=['get'], url_path='low-stock')
    def low_stock(self, request):
        items = services.low_stock_items()
        return Response({'success': True, 'alerts': InventoryAlertSerializer(items, many=True).data})

    @action(detail=False, methods=['get'], url_path='expiry-alerts')
    def expiry_alerts(self, request):
        """Items expiring within the warning window and items already expired."""
        expiring, expired = services.expiry_items()
        return Response({
            'success': True,
            'expiring_items': InventoryAlertSerializer(expiring, many=True).data,
            'expired_items': InventoryAlertSerializer(expired, many=True).data,
        })
