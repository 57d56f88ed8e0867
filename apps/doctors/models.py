from decimal import Decimal

from django.contrib.auth.hashers import check_password, make_password
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Doctor(models.Model):
    """
    Doctor account and public profile.

    ``slots_booked`` maps a slot date to the slot times already taken, e.g.
    ``{"12_10_2026": ["10:00 AM", "10:30 AM"]}``.
    """

    name = models.CharField(max_length=200)
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=128, help_text="Hashed password")
    image = models.URLField(max_length=500, blank=True, help_text="Profile image URL")
    speciality = models.CharField(max_length=100)
    degree = models.CharField(max_length=100)
    experience = models.CharField(max_length=50, help_text="e.g. '4 Years'")
    about = models.TextField()
    available = models.BooleanField(default=True)
    fees = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Appointment fee"
    )
    address = models.JSONField(default=dict, blank=True)
    slots_booked = models.JSONField(default=dict, blank=True)

    # Telemedicine fees; blank means the default fee for the session type applies
    consultation_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    follow_up_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    emergency_fee = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'doctors'
        ordering = ['name']
        verbose_name = 'Doctor'
        verbose_name_plural = 'Doctors'
        indexes = [
            models.Index(fields=['speciality'], name='doctor_speciality_idx'),
            models.Index(fields=['available'], name='doctor_available_idx'),
        ]

    def __str__(self):
        return f"Dr. {self.name} ({self.speciality})"

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password):
        return check_password(raw_password, self.password)

    def is_slot_free(self, slot_date, slot_time):
        return slot_time not in self.slots_booked.get(slot_date, [])

    def book_slot(self, slot_date, slot_time):
        self.slots_booked.setdefault(slot_date, []).append(slot_time)
        self.save(update_fields=['slots_booked', 'updated_at'])

    def release_slot(self, slot_date, slot_time):
        taken = self.slots_booked.get(slot_date, [])
        self.slots_booked[slot_date] = [slot for slot in taken if slot != slot_time]
        self.save(update_fields=['slots_booked', 'updated_at'])
