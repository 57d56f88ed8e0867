import math
import random
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import IntegrityError, models, transaction
from django.utils import timezone

SECONDS_PER_DAY = 24 * 60 * 60


class Admission(models.Model):
    """
    Admission Model - one inpatient stay, from intake to discharge.

    Room charges are open-ended while the stay is active: every save
    recomputes ``total_charges`` against the actual discharge date, or the
    current time when the patient is still admitted.

    ``patient_name``, ``patient_age``, ``patient_gender`` and
    ``doctor_name_at_admission`` are snapshots taken when the admission is
    created; they do not follow later changes to the patient or doctor.
    """

    ADMISSION_TYPE_CHOICES = [
        ('emergency', 'Emergency'),
        ('planned', 'Planned'),
        ('transfer', 'Transfer'),
    ]

    GENDER_CHOICES = [
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
        ('not_specified', 'Not Specified'),
    ]

    ROOM_TYPE_CHOICES = [
        ('general', 'General'),
        ('semi_private', 'Semi-Private'),
        ('private', 'Private'),
        ('icu', 'ICU'),
        ('ccu', 'CCU'),
        ('emergency', 'Emergency'),
    ]

    STATUS_CHOICES = [
        ('admitted', 'Admitted'),
        ('under_treatment', 'Under Treatment'),
        ('ready_for_discharge', 'Ready for Discharge'),
        ('discharged', 'Discharged'),
        ('transferred', 'Transferred'),
        ('deceased', 'Deceased'),
    ]

    DISCHARGE_TYPE_CHOICES = [
        ('regular', 'Regular'),
        ('against_medical_advice', 'Against Medical Advice'),
        ('transfer', 'Transfer'),
        ('death', 'Death'),
        ('absconded', 'Absconded'),
    ]

    LAB_TEST_STATUS_CHOICES = [
        ('ordered', 'Ordered'),
        ('in_progress', 'In Progress'),
        ('completed', 'Completed'),
        ('cancelled', 'Cancelled'),
    ]

    admission_id = models.CharField(
        max_length=20,
        unique=True,
        editable=False,
        help_text="Admission code ADM<YYYY><MM><4 random digits>"
    )

    # Patient (optional for walk-ins) and snapshot of the details at admission
    patient = models.ForeignKey(
        'patients.PatientProfile',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='admissions'
    )
    patient_name = models.CharField(max_length=200, blank=True)
    patient_age = models.PositiveIntegerField(default=0)
    patient_gender = models.CharField(max_length=20, choices=GENDER_CHOICES, default='not_specified')
    patient_phone = models.CharField(max_length=20, blank=True)

    admission_type = models.CharField(max_length=20, choices=ADMISSION_TYPE_CHOICES, default='emergency')

    # Admitting doctor and name snapshot
    doctor = models.ForeignKey(
        'doctors.Doctor',
        on_delete=models.PROTECT,
        related_name='admissions',
        help_text="Admitting doctor"
    )
    doctor_name_at_admission = models.CharField(max_length=200, blank=True)
    department = models.CharField(max_length=100)

    # Room assignment
    room_number = models.CharField(max_length=20, default='TBD')
    room_type = models.CharField(max_length=20, choices=ROOM_TYPE_CHOICES, default='general')
    bed_number = models.CharField(max_length=20, default='TBD')
    daily_charges = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    admission_date = models.DateTimeField(default=timezone.now)
    expected_discharge_date = models.DateTimeField(null=True, blank=True)
    expected_stay_duration = models.PositiveIntegerField(null=True, blank=True, help_text="Expected stay in days")
    actual_discharge_date = models.DateTimeField(null=True, blank=True)

    admission_reason = models.TextField()
    initial_diagnosis = models.TextField()
    final_diagnosis = models.TextField(blank=True)
    treatment_plan = models.TextField(blank=True)

    # Append-only clinical logs
    attending_physicians = models.JSONField(
        default=list,
        blank=True,
        help_text="[{doctor_id, doctor_name, role, assigned_date}]"
    )
    vitals = models.JSONField(default=list, blank=True)
    medications = models.JSONField(default=list, blank=True)
    procedures = models.JSONField(default=list, blank=True)
    lab_tests = models.JSONField(default=list, blank=True)
    notes = models.JSONField(default=list, blank=True)

    discharge_details = models.JSONField(default=dict, blank=True)
    emergency_contact = models.JSONField(
        default=dict,
        blank=True,
        help_text="{name, relationship, phone, address}"
    )
    insurance = models.JSONField(
        default=dict,
        blank=True,
        help_text="{has_insurance, insurance_provider, policy_number, pre_auth_number, coverage_amount}"
    )

    status = models.CharField(max_length=30, choices=STATUS_CHOICES, default='admitted')
    total_charges = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'admissions'
        ordering = ['-admission_date']
        verbose_name = 'Admission'
        verbose_name_plural = 'Admissions'
        indexes = [
            models.Index(fields=['status'], name='admission_status_idx'),
            models.Index(fields=['department'], name='admission_department_idx'),
            models.Index(fields=['admission_date'], name='admission_date_idx'),
            models.Index(fields=['room_number', 'status'], name='admission_room_status_idx'),
        ]

    def __str__(self):
        return f"{self.admission_id} - {self.patient_name}"

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        instance._stored_admission_id = instance.__dict__.get('admission_id')
        return instance

    def save(self, *args, **kwargs):
        """Assign the admission code on first save and recompute room charges."""
        stored_id = getattr(self, '_stored_admission_id', None)
        if stored_id and self.admission_id != stored_id:
            raise ValueError("admission_id cannot be changed once assigned")

        self.total_charges = self.calculate_total_charges()
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'total_charges' not in update_fields:
            kwargs['update_fields'] = list(update_fields) + ['total_charges']

        if self.admission_id:
            super().save(*args, **kwargs)
            return

        max_retries = 5
        last_exception = None
        for _ in range(max_retries):
            self.admission_id = self.generate_admission_id()
            try:
                with transaction.atomic():
                    super().save(*args, **kwargs)
                self._stored_admission_id = self.admission_id
                return
            except IntegrityError as exc:
                last_exception = exc
                if 'admission_id' in str(exc):
                    continue
                self.admission_id = ''
                raise

        self.admission_id = ''
        raise last_exception

    @staticmethod
    def generate_admission_id(now=None):
        """Generate admission code: ADM<YYYY><MM><4 random digits>"""
        now = timezone.localtime(now or timezone.now())
        return f"ADM{now.year}{now.month:02d}{random.randint(0, 9999):04d}"

    def calculate_total_charges(self, now=None):
        """
        Room charges for the stay: whole days started times the daily rate.

        The stay runs to ``actual_discharge_date`` or, while still open, to
        ``now``. Without a daily rate the stored total is left unchanged.
        """
        if not self.daily_charges or not self.admission_date:
            return self.total_charges

        end = self.actual_discharge_date or now or timezone.now()
        days = math.ceil((end - self.admission_date).total_seconds() / SECONDS_PER_DAY)
        return Decimal(days) * Decimal(self.daily_charges)

    @property
    def is_active(self):
        return self.status != 'discharged'

    def discharge(self, discharge_type='regular', discharge_summary='', follow_up_instructions='',
                  follow_up_date=None, discharged_by='', final_diagnosis='', final_bill_amount=None):
        """Close the stay; room charges stop accruing at the discharge time."""
        discharged_at = timezone.now()
        self.status = 'discharged'
        self.actual_discharge_date = discharged_at
        self.final_diagnosis = final_diagnosis or ''
        self.discharge_details = {
            'discharge_date': discharged_at.isoformat(),
            'discharge_type': discharge_type,
            'discharge_summary': discharge_summary,
            'follow_up_instructions': follow_up_instructions,
            'follow_up_date': follow_up_date.isoformat() if follow_up_date else None,
            'discharged_by': discharged_by,
            'final_bill_amount': str(final_bill_amount) if final_bill_amount is not None else None,
        }
        self.save()

    def attending_role_for(self, doctor_id):
        """Label describing how ``doctor_id`` is involved in this stay."""
        if self.doctor_id == doctor_id:
            return 'Admitting Physician'
        for physician in self.attending_physicians:
            if str(physician.get('doctor_id')) == str(doctor_id):
                return physician.get('role') or 'Attending Physician'
        return None


def synthetic_rooms():
    """
    Fixed room inventory R001..R<HMS_TOTAL_ROOMS>.

    The first 20 rooms are ICU, the next 20 Private, the next 40
    Semi-Private and the rest General.
    """
    rooms = []
    for index in range(settings.HMS_TOTAL_ROOMS):
        if index < 20:
            room_type = 'icu'
        elif index < 40:
            room_type = 'private'
        elif index < 80:
            room_type = 'semi_private'
        else:
            room_type = 'general'
        rooms.append({'room_number': f"R{index + 1:03d}", 'room_type': room_type})
    return rooms
