from django.contrib import admin

from common.admin_site import HMSModelAdmin, hms_admin_site

from .models import PatientProfile


@admin.register(PatientProfile, site=hms_admin_site)
class PatientProfileAdmin(HMSModelAdmin):
    list_display = ['id', 'name', 'email', 'phone', 'gender', 'dob', 'created_at']
    list_filter = ['gender', 'created_at']
    search_fields = ['name', 'email', 'phone']
    exclude = ['password']
    derived_fields = ['created_at', 'updated_at']
