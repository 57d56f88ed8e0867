"""
Inventory stock movements and alert queries.

Every stock-changing operation ends with an alert check so the item's
``alerts`` reflect the new quantity and expiry state.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from common.exceptions import NotFound, ValidationError
from common.utils import (
    parse_datetime_param, parse_json_field, require_fields, to_decimal, to_int
)

from .models import InventoryItem, InventoryRestock, InventoryUsage

logger = logging.getLogger(__name__)


def get_item(item_id, for_update=False):
    queryset = InventoryItem.objects.all()
    if for_update:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(pk=item_id)
    except (InventoryItem.DoesNotExist, ValueError, TypeError):
        raise NotFound('Item not found')


def _choice_key(value, choices, field_name):
    key = str(value).strip().lower().replace('-', '_').replace(' ', '_')
    if key not in {choice for choice, _ in choices}:
        raise ValidationError(f"Invalid {field_name}: {value}")
    return key


def add_item(data):
    require_fields(
        data,
        ['item_name', 'category', 'unit_price', 'quantity', 'max_stock_level', 'unit'],
    )
    item = InventoryItem(
        item_name=data['item_name'],
        category=_choice_key(data['category'], InventoryItem.CATEGORY_CHOICES, 'category'),
        description=data.get('description') or '',
        manufacturer=data.get('manufacturer') or '',
        batch_number=data.get('batch_number') or '',
        expiry_date=parse_datetime_param(data.get('expiry_date'), 'expiry_date'),
        unit_price=to_decimal(data['unit_price'], 'unit_price'),
        quantity=to_int(data['quantity'], 'quantity'),
        reorder_level=to_int(data.get('reorder_level'), 'reorder_level', default=10),
        max_stock_level=to_int(data['max_stock_level'], 'max_stock_level'),
        unit=_choice_key(data['unit'], InventoryItem.UNIT_CHOICES, 'unit'),
        supplier=parse_json_field(data.get('supplier'), 'supplier', default={}),
        location=parse_json_field(data.get('location'), 'location', default={}),
    )
    item.save()
    item.check_alerts()

    logger.info(f"Inventory item {item.item_code} added: {item.item_name}, quantity {item.quantity}")
    return item


def update_item(item, data):
    """Apply an edit; status is re-derived and alerts rebuilt."""
    from .serializers import InventoryItemUpdateSerializer

    payload = {
        key: data[key] for key in InventoryItemUpdateSerializer.Meta.fields
        if key in data and key not in ('supplier', 'location')
    }
    for key in ('supplier', 'location'):
        if key in data:
            payload[key] = parse_json_field(data[key], key, default={})

    serializer = InventoryItemUpdateSerializer(item, data=payload, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    item.check_alerts()

    logger.info(f"Inventory item {item.item_code} updated: {sorted(payload)}")
    return item


def record_usage(item_id, quantity_used, department='', purpose=''):
    """
    Take stock out of an item. Fails without touching the item when the
    requested quantity exceeds what is on hand.
    """
    quantity_used = to_int(quantity_used, 'quantity_used')
    if not quantity_used or quantity_used <= 0:
        raise ValidationError('Invalid quantity')

    with transaction.atomic():
        item = get_item(item_id, for_update=True)
        if item.quantity < quantity_used:
            logger.warning(
                f"Usage of {quantity_used} rejected for {item.item_code}: only {item.quantity} available"
            )
            raise ValidationError('Insufficient quantity available')

        item.quantity -= quantity_used
        item.save(update_fields=['quantity'])
        InventoryUsage.objects.create(
            item=item,
            quantity_used=quantity_used,
            department=department or '',
            purpose=purpose or '',
        )
        item.check_alerts()

    logger.info(f"Usage of {quantity_used} recorded for {item.item_code}, {item.quantity} left")
    return item


def restock_item(item_id, quantity, unit_price=None, supplier='', batch_number=''):
    """Add stock; a given unit price also becomes the item's price."""
    quantity = to_int(quantity, 'quantity')
    if not quantity or quantity <= 0:
        raise ValidationError('Invalid quantity')
    unit_price = to_decimal(unit_price, 'unit_price')

    with transaction.atomic():
        item = get_item(item_id, for_update=True)
        item.quantity += quantity
        if unit_price:
            item.unit_price = unit_price
        item.save(update_fields=['quantity', 'unit_price'])
        InventoryRestock.objects.create(
            item=item,
            quantity=quantity,
            unit_price=unit_price,
            supplier=supplier or '',
            batch_number=batch_number or '',
        )
        item.check_alerts()

    logger.info(f"{item.item_code} restocked with {quantity}, now {item.quantity}")
    return item


def low_stock_items():
    return InventoryItem.objects.filter(status__in=['low_stock', 'out_of_stock']).order_by('quantity')


def expiry_items(now=None):
    """(expiring within the warning window, already expired)"""
    now = now or timezone.now()
    warning_until = now + timedelta(days=settings.HMS_EXPIRY_WARNING_DAYS)
    expiring = InventoryItem.objects.filter(expiry_date__gte=now, expiry_date__lte=warning_until)
    expired = InventoryItem.objects.filter(expiry_date__lt=now)
    return expiring.order_by('expiry_date'), expired.order_by('expiry_date')
