from django.contrib import admin

from common.admin_site import HMSModelAdmin, hms_admin_site

from .models import TelemedicineSession


@admin.register(TelemedicineSession, site=hms_admin_site)
class TelemedicineSessionAdmin(HMSModelAdmin):
    list_display = [
        'session_id', 'patient', 'doctor', 'session_type', 'status',
        'scheduled_time', 'session_fee', 'payment_status'
    ]
    list_filter = ['session_type', 'status', 'payment_status']
    search_fields = ['session_id', 'room_id', 'patient__name', 'doctor__name']
    derived_fields = ['session_id', 'room_id', 'start_time', 'end_time', 'created_at', 'updated_at']
