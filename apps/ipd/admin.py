from django.contrib import admin

from common.admin_site import HMSModelAdmin, hms_admin_site

from .models import Admission


@admin.register(Admission, site=hms_admin_site)
class AdmissionAdmin(HMSModelAdmin):
    """Admin for Admission model."""

    list_display = [
        'admission_id', 'patient_name', 'doctor_name_at_admission', 'department',
        'room_number', 'bed_number', 'daily_charges', 'status',
        'admission_date', 'total_charges'
    ]
    list_filter = ['status', 'admission_type', 'room_type', 'department']
    search_fields = ['admission_id', 'patient_name', 'doctor_name_at_admission', 'room_number']
    date_hierarchy = 'admission_date'
    derived_fields = ['admission_id', 'total_charges', 'created_at', 'updated_at']

    fieldsets = (
        ('Admission', {
            'fields': ('admission_id', 'admission_type', 'status', 'admission_date')
        }),
        ('Patient', {
            'fields': ('patient', 'patient_name', 'patient_age', 'patient_gender', 'patient_phone')
        }),
        ('Doctor', {
            'fields': ('doctor', 'doctor_name_at_admission', 'department', 'attending_physicians')
        }),
        ('Room', {
            'fields': ('room_number', 'room_type', 'bed_number', 'daily_charges', 'total_charges')
        }),
        ('Clinical', {
            'fields': (
                'admission_reason', 'initial_diagnosis', 'final_diagnosis', 'treatment_plan',
                'vitals', 'medications', 'procedures', 'lab_tests', 'notes'
            ),
            'classes': ('collapse',)
        }),
        ('Discharge', {
            'fields': (
                'expected_stay_duration', 'expected_discharge_date',
                'actual_discharge_date', 'discharge_details'
            )
        }),
        ('Contacts & Insurance', {
            'fields': ('emergency_contact', 'insurance'),
            'classes': ('collapse',)
        }),
        ('System Fields', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
