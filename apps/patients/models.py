from datetime import datetime

from django.contrib.auth.hashers import check_password, make_password
from django.db import models
from django.utils import timezone

DOB_FORMAT = '%d_%m_%Y'


def age_from_dob(dob, today=None):
    """
    Whole years between a ``DD_MM_YYYY`` birth date and ``today``.

    Returns None when the value is missing or not in that format.
    """
    if not dob:
        return None
    try:
        born = datetime.strptime(dob, DOB_FORMAT).date()
    except (TypeError, ValueError):
        return None

    today = today or timezone.localdate()
    age = today.year - born.year
    if (today.month, today.day) < (born.month, born.day):
        age -= 1
    return age


class PatientProfile(models.Model):
    """
    Patient portal account.

    Patients register themselves from the patient SPA; admissions and bills
    reference them but also keep a snapshot of name/contact details.
    """

    GENDER_CHOICES = [
        ('not_selected', 'Not Selected'),
        ('male', 'Male'),
        ('female', 'Female'),
        ('other', 'Other'),
    ]

    name = models.CharField(max_length=200)
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=128, help_text="Hashed password")
    image = models.URLField(max_length=500, blank=True, help_text="Profile image URL")
    phone = models.CharField(max_length=20, default='0000000000')
    address = models.JSONField(
        default=dict,
        blank=True,
        help_text="Address lines (JSON: line1, line2)"
    )
    gender = models.CharField(max_length=20, choices=GENDER_CHOICES, default='not_selected')
    dob = models.CharField(
        max_length=20,
        blank=True,
        help_text="Date of birth as DD_MM_YYYY"
    )

    created_at = models.DateTimeField(default=timezone.now, help_text="Registration date")
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'patients'
        ordering = ['-created_at']
        verbose_name = 'Patient'
        verbose_name_plural = 'Patients'
        indexes = [
            models.Index(fields=['email'], name='patient_email_idx'),
            models.Index(fields=['created_at'], name='patient_created_idx'),
        ]

    def __str__(self):
        return f"{self.name} <{self.email}>"

    def set_password(self, raw_password):
        self.password = make_password(raw_password)

    def check_password(self, raw_password):
        return check_password(raw_password, self.password)

    @property
    def age(self):
        return age_from_dob(self.dob)
