from decimal import Decimal

from django.db import models
from django.utils import timezone


class Appointment(models.Model):
    """
    Outpatient appointment booked by a patient against a doctor's slot.

    ``patient_data`` and ``doctor_data`` are snapshots taken at booking time;
    they do not follow later profile changes.
    """

    patient = models.ForeignKey(
        'patients.PatientProfile',
        on_delete=models.CASCADE,
        related_name='appointments'
    )
    doctor = models.ForeignKey(
        'doctors.Doctor',
        on_delete=models.CASCADE,
        related_name='appointments'
    )
    slot_date = models.CharField(max_length=20, help_text="Slot date as D_M_YYYY")
    slot_time = models.CharField(max_length=20, help_text="Slot time label, e.g. '10:30 AM'")

    patient_data = models.JSONField(default=dict, blank=True)
    doctor_data = models.JSONField(default=dict, blank=True)

    amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    booked_at = models.DateTimeField(default=timezone.now)

    cancelled = models.BooleanField(default=False)
    payment = models.BooleanField(default=False)
    is_completed = models.BooleanField(default=False)
    is_telemedicine = models.BooleanField(default=False)

    class Meta:
        db_table = 'appointments'
        ordering = ['-booked_at']
        verbose_name = 'Appointment'
        verbose_name_plural = 'Appointments'
        indexes = [
            models.Index(fields=['patient', 'booked_at'], name='appointment_patient_idx'),
            models.Index(fields=['doctor', 'booked_at'], name='appointment_doctor_idx'),
            models.Index(fields=['cancelled', 'is_completed'], name='appointment_state_idx'),
        ]

    def __str__(self):
        return f"{self.patient_data.get('name', self.patient_id)} with Dr. {self.doctor_data.get('name', self.doctor_id)} on {self.slot_date} {self.slot_time}"
