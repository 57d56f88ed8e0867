from django.contrib import admin

from common.admin_site import HMSModelAdmin, hms_admin_site

from .models import Doctor


@admin.register(Doctor, site=hms_admin_site)
class DoctorAdmin(HMSModelAdmin):
    list_display = ['id', 'name', 'email', 'speciality', 'degree', 'fees', 'available', 'created_at']
    list_filter = ['speciality', 'available']
    search_fields = ['name', 'email', 'speciality']
    exclude = ['password']
    derived_fields = ['slots_booked', 'created_at', 'updated_at']

    fieldsets = (
        ('Profile', {
            'fields': ('name', 'email', 'image', 'speciality', 'degree', 'experience', 'about', 'address')
        }),
        ('Availability & Fees', {
            'fields': ('available', 'fees', 'consultation_fee', 'follow_up_fee', 'emergency_fee', 'slots_booked')
        }),
        ('System Fields', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
