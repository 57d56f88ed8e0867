from django.contrib import admin

from common.admin_site import HMSModelAdmin, hms_admin_site

from .models import InventoryItem, InventoryRestock, InventoryUsage


class InventoryUsageInline(admin.TabularInline):
    model = InventoryUsage
    extra = 0


class InventoryRestockInline(admin.TabularInline):
    model = InventoryRestock
    extra = 0


@admin.register(InventoryItem, site=hms_admin_site)
class InventoryItemAdmin(HMSModelAdmin):
    list_display = [
        'item_code', 'item_name', 'category', 'quantity', 'reorder_level',
        'unit', 'unit_price', 'expiry_date', 'status'
    ]
    list_filter = ['category', 'status', 'unit']
    search_fields = ['item_code', 'item_name', 'manufacturer', 'batch_number']
    inlines = [InventoryUsageInline, InventoryRestockInline]
    derived_fields = ['item_code', 'alerts', 'created_at', 'last_updated']

    fieldsets = (
        ('Item', {
            'fields': ('item_code', 'item_name', 'category', 'description', 'manufacturer', 'batch_number')
        }),
        ('Stock', {
            'fields': ('quantity', 'reorder_level', 'max_stock_level', 'unit', 'unit_price', 'expiry_date', 'status')
        }),
        ('Supplier & Location', {
            'fields': ('supplier', 'location'),
            'classes': ('collapse',)
        }),
        ('Alerts', {
            'fields': ('alerts',)
        }),
        ('System Fields', {
            'fields': ('created_at', 'last_updated'),
            'classes': ('collapse',)
        }),
    )
