from django.contrib import admin

from common.admin_site import HMSModelAdmin, hms_admin_site

from .models import Bill, BillPayment, BillService


class BillServiceInline(admin.TabularInline):
    model = BillService
    extra = 0
    readonly_fields = ['total_price']


class BillPaymentInline(admin.TabularInline):
    model = BillPayment
    extra = 0
    readonly_fields = ['payment_id', 'payment_date']


@admin.register(Bill, site=hms_admin_site)
class BillAdmin(HMSModelAdmin):
    """Admin for Bill model. Totals and status are derived from the inlines."""

    list_display = [
        'bill_number', 'patient_name', 'bill_type', 'total_amount',
        'payment_status', 'billing_date', 'due_date'
    ]
    list_filter = ['payment_status', 'bill_type']
    search_fields = ['bill_number', 'patient_name', 'doctor_name']
    date_hierarchy = 'billing_date'
    inlines = [BillServiceInline, BillPaymentInline]
    derived_fields = [
        'bill_number', 'subtotal', 'total_discount', 'total_tax',
        'total_amount', 'payment_status', 'created_at', 'updated_at'
    ]

    fieldsets = (
        ('Bill', {
            'fields': ('bill_number', 'bill_type', 'billing_date', 'due_date', 'generated_by')
        }),
        ('Patient & Doctor', {
            'fields': ('patient', 'patient_name', 'patient_contact', 'doctor', 'doctor_name',
                       'appointment', 'admission_code')
        }),
        ('Totals', {
            'fields': ('subtotal', 'total_discount', 'total_tax', 'total_amount', 'payment_status')
        }),
        ('Direct Payment', {
            'fields': ('payment_method', 'paid_date')
        }),
        ('Insurance & Notes', {
            'fields': ('insurance', 'notes'),
            'classes': ('collapse',)
        }),
        ('System Fields', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
