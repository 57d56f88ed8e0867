from django.contrib import admin

from common.admin_site import HMSModelAdmin, hms_admin_site

from .models import Appointment


@admin.register(Appointment, site=hms_admin_site)
class AppointmentAdmin(HMSModelAdmin):
    list_display = [
        'id', 'patient', 'doctor', 'slot_date', 'slot_time',
        'amount', 'cancelled', 'payment', 'is_completed', 'booked_at'
    ]
    list_filter = ['cancelled', 'payment', 'is_completed', 'is_telemedicine']
    search_fields = ['patient__name', 'doctor__name', 'slot_date']
    derived_fields = ['patient_data', 'doctor_data', 'booked_at']
