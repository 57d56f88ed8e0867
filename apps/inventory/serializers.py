from rest_framework import serializers

from .models import InventoryItem, InventoryRestock, InventoryUsage


class InventoryUsageSerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryUsage
        fields = ['id', 'date', 'quantity_used', 'department', 'purpose']
        read_only_fields = fields


class InventoryRestockSerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryRestock
        fields = ['id', 'date', 'quantity', 'unit_price', 'supplier', 'batch_number']
        read_only_fields = fields


class InventoryItemSerializer(serializers.ModelSerializer):
    """Inventory item with its usage and restock history."""

    usage = InventoryUsageSerializer(many=True, read_only=True)
    restock_history = InventoryRestockSerializer(many=True, read_only=True)

    class Meta:
        model = InventoryItem
        fields = [
            'id', 'item_name', 'item_code', 'category', 'description', 'manufacturer',
            'batch_number', 'expiry_date', 'unit_price', 'quantity', 'reorder_level',
            'max_stock_level', 'unit', 'supplier', 'location', 'status', 'alerts',
            'usage', 'restock_history', 'created_at', 'last_updated'
        ]
        read_only_fields = fields


class InventoryAlertSerializer(serializers.ModelSerializer):
    """Compact row used by the low-stock and expiry lists."""

    class Meta:
        model = InventoryItem
        fields = [
            'id', 'item_name', 'item_code', 'category', 'quantity',
            'reorder_level', 'expiry_date', 'status'
        ]
        read_only_fields = fields


class InventoryItemCreateSerializer(serializers.Serializer):
    """Add-item form (schema only)."""

    item_name = serializers.CharField()
    category = serializers.ChoiceField(choices=InventoryItem.CATEGORY_CHOICES)
    description = serializers.CharField(required=False)
    manufacturer = serializers.CharField(required=False)
    batch_number = serializers.CharField(required=False)
    expiry_date = serializers.DateTimeField(required=False)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    quantity = serializers.IntegerField()
    reorder_level = serializers.IntegerField(required=False)
    max_stock_level = serializers.IntegerField()
    unit = serializers.ChoiceField(choices=InventoryItem.UNIT_CHOICES)
    supplier = serializers.JSONField(required=False)
    location = serializers.JSONField(required=False)


class InventoryItemUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryItem
        fields = [
            'item_name', 'category', 'description', 'manufacturer', 'batch_number',
            'expiry_date', 'unit_price', 'quantity', 'reorder_level', 'max_stock_level',
            'unit', 'supplier', 'location', 'status'
        ]


class UsageSerializer(serializers.Serializer):
    quantity_used = serializers.IntegerField(min_value=1)
    department = serializers.CharField(required=False)
    purpose = serializers.CharField(required=False)


class RestockSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    supplier = serializers.CharField(required=False)
    batch_number = serializers.CharField(required=False)
