import random
import string
import uuid
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

DEFAULT_SESSION_FEES = {
    'emergency': Decimal('150.00'),
    'follow_up': Decimal('30.00'),
}
DEFAULT_SESSION_FEE = Decimal('50.00')


def generate_room_id():
    """room_<epoch ms>_<9 random base36 chars>"""
    millis = int(timezone.now().timestamp() * 1000)
    suffix = ''.join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"room_{millis}_{suffix}"


def session_fee_for(doctor, session_type):
    """The doctor's configured fee for the session type, else the house default."""
    if session_type == 'emergency':
        configured = doctor.emergency_fee
    elif session_type == 'follow_up':
        configured = doctor.follow_up_fee
    else:
        configured = doctor.consultation_fee
    if configured:
        return configured
    return DEFAULT_SESSION_FEES.get(session_type, DEFAULT_SESSION_FEE)


class TelemedicineSession(models.Model):
    """
    Remote consultation between a patient and a doctor.

    Lifecycle: pending -> scheduled (approved) or rejected; scheduled ->
    ongoing on join; ongoing -> completed when the doctor ends it. Admins
    may cancel at any point.
    """

    SESSION_TYPE_CHOICES = [
        ('video', 'Video'),
        ('audio', 'Audio'),
        ('chat', 'Chat'),
        ('consultation', 'Consultation'),
        ('follow_up', 'Follow-up'),
        ('emergency', 'Emergency'),
    ]

    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
        ('scheduled', 'Scheduled'),
        ('ongoing', 'Ongoing'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    PAYMENT_STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('paid', 'Paid'),
        ('refunded', 'Refunded'),
    ]

    SENDER_CHOICES = ('patient', 'doctor')
    MESSAGE_TYPE_CHOICES = ('text', 'image', 'file')

    session_id = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    room_id = models.CharField(max_length=50, unique=True, default=generate_room_id, editable=False)

    patient = models.ForeignKey(
        'patients.PatientProfile',
        on_delete=models.CASCADE,
        related_name='telemedicine_sessions'
    )
    doctor = models.ForeignKey(
        'doctors.Doctor',
        on_delete=models.CASCADE,
        related_name='telemedicine_sessions'
    )
    appointment = models.ForeignKey(
        'appointments.Appointment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='telemedicine_sessions'
    )

    session_type = models.CharField(max_length=20, choices=SESSION_TYPE_CHOICES, default='consultation')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    scheduled_time = models.DateTimeField()
    duration = models.PositiveIntegerField(default=30, help_text="Minutes")
    start_time = models.DateTimeField(null=True, blank=True)
    end_time = models.DateTimeField(null=True, blank=True)
    recording_url = models.URLField(max_length=500, blank=True)

    chat_history = models.JSONField(default=list, blank=True)
    technical_issues = models.JSONField(default=list, blank=True)

    prescription_notes = models.TextField(blank=True)
    doctor_notes = models.TextField(blank=True)
    follow_up_required = models.BooleanField(default=False)
    follow_up_date = models.DateTimeField(null=True, blank=True)

    session_fee = models.DecimalField(max_digits=10, decimal_places=2)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default='pending')
    patient_rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    feedback = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'telemedicine_sessions'
        ordering = ['-scheduled_time']
        indexes = [
            models.Index(fields=['patient', 'scheduled_time'], name='telemedicine_patient_idx'),
            models.Index(fields=['doctor', 'scheduled_time'], name='telemedicine_doctor_idx'),
            models.Index(fields=['status'], name='telemedicine_status_idx'),
        ]

    def __str__(self):
        return f"{self.get_session_type_display()} session {self.session_id} ({self.status})"

    def add_message(self, sender, message, message_type='text'):
        self.chat_history = list(self.chat_history or []) + [{
            'sender': sender,
            'message': message,
            'message_type': message_type,
            'timestamp': timezone.now().isoformat(),
        }]
        self.save(update_fields=['chat_history', 'updated_at'])
