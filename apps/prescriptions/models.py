from django.db import models
from django.utils import timezone


class Prescription(models.Model):
    """
    Doctor's prescription written against a single appointment.

    Patient, doctor and appointment details are copied in at creation time.
    """

    STATUS_CHOICES = [
        ('active', 'Active'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    appointment = models.OneToOneField(
        'appointments.Appointment',
        on_delete=models.CASCADE,
        related_name='prescription'
    )
    doctor = models.ForeignKey('doctors.Doctor', on_delete=models.CASCADE, related_name='prescriptions')
    patient = models.ForeignKey('patients.PatientProfile', on_delete=models.CASCADE, related_name='prescriptions')

    patient_data = models.JSONField(default=dict, blank=True)
    doctor_data = models.JSONField(default=dict, blank=True)
    appointment_data = models.JSONField(default=dict, blank=True)

    diagnosis = models.TextField()
    symptoms = models.TextField(blank=True)
    lab_tests = models.JSONField(default=list, blank=True, help_text="List of test names")
    advice = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    follow_up_date = models.CharField(max_length=30, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')

    prescription_date = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'prescriptions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['doctor', 'created_at'], name='prescription_doctor_idx'),
            models.Index(fields=['patient', 'created_at'], name='prescription_patient_idx'),
        ]

    def __str__(self):
        return f"Prescription {self.pk} for {self.patient_data.get('name', self.patient_id)}"


class PrescribedMedication(models.Model):
    prescription = models.ForeignKey(Prescription, on_delete=models.CASCADE, related_name='medications')
    name = models.CharField(max_length=200)
    dosage = models.CharField(max_length=100)
    frequency = models.CharField(max_length=100)
    duration = models.CharField(max_length=100)
    instructions = models.TextField(blank=True)

    class Meta:
        db_table = 'prescription_medications'
        ordering = ['id']

    def __str__(self):
        return f"{self.name} {self.dosage}"
