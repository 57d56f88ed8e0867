from django.contrib import admin

from common.admin_site import HMSModelAdmin, hms_admin_site

from .models import PrescribedMedication, Prescription


class PrescribedMedicationInline(admin.TabularInline):
    model = PrescribedMedication
    extra = 0


@admin.register(Prescription, site=hms_admin_site)
class PrescriptionAdmin(HMSModelAdmin):
    list_display = ['id', 'appointment', 'doctor', 'patient', 'status', 'prescription_date']
    list_filter = ['status']
    search_fields = ['diagnosis', 'patient__name', 'doctor__name']
    inlines = [PrescribedMedicationInline]
    derived_fields = ['patient_data', 'doctor_data', 'appointment_data', 'created_at', 'updated_at']
