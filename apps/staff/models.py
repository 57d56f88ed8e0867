from datetime import datetime
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import IntegrityError, models, transaction
from django.utils import timezone

CLOCK_FORMATS = ('%H:%M', '%H:%M:%S', '%I:%M %p', '%I:%M%p')


def default_leave_balance():
    return {'casual': 12, 'sick': 10, 'annual': 21}


def parse_clock(value):
    """Parse a wall-clock string such as '09:30' or '5:45 PM'; None if unparseable."""
    if not value:
        return None
    for fmt in CLOCK_FORMATS:
        try:
            return datetime.strptime(str(value).strip().upper(), fmt).time()
        except ValueError:
            continue
    return None


class Staff(models.Model):
    """Hospital employee record."""

    ROLE_CHOICES = [
        ('doctor', 'Doctor'),
        ('nurse', 'Nurse'),
        ('technician', 'Technician'),
        ('administrator', 'Administrator'),
        ('support_staff', 'Support Staff'),
    ]

    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
        ('on_leave', 'On Leave'),
        ('terminated', 'Terminated'),
    ]

    employee_id = models.CharField(
        max_length=20,
        unique=True,
        editable=False,
        help_text="EMP<year><4 digit sequence>"
    )
    name = models.CharField(max_length=200)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=20)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES)
    department = models.CharField(max_length=100)
    date_of_joining = models.DateField(default=timezone.localdate)
    qualification = models.CharField(max_length=200)
    experience = models.PositiveIntegerField(help_text="Years")
    salary = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    address = models.JSONField(default=dict, blank=True, help_text="{line1, line2, city, state, zip_code}")
    emergency_contact = models.JSONField(default=dict, blank=True, help_text="{name, phone, relationship}")
    shifts = models.JSONField(default=list, blank=True, help_text="[{day, start_time, end_time}]")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    leave_balance = models.JSONField(default=default_leave_balance, blank=True)
    image = models.URLField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'staff'
        ordering = ['name']
        verbose_name = 'Staff Member'
        verbose_name_plural = 'Staff'
        indexes = [
            models.Index(fields=['role'], name='staff_role_idx'),
            models.Index(fields=['department'], name='staff_department_idx'),
            models.Index(fields=['status'], name='staff_status_idx'),
        ]

    def __str__(self):
        return f"{self.employee_id} - {self.name}"

    def save(self, *args, **kwargs):
        max_retries = 3
        last_exception = None
        for _ in range(max_retries):
            generated = False
            if not self.employee_id:
                self.employee_id = self.generate_employee_id()
                generated = True
            try:
                with transaction.atomic():
                    super().save(*args, **kwargs)
                return
            except IntegrityError as exc:
                last_exception = exc
                if generated and 'employee_id' in str(exc):
                    self.employee_id = ''
                    continue
                raise

        raise last_exception

    @staticmethod
    def generate_employee_id():
        """EMP<year><count + 1, 4 digits>"""
        year = timezone.localdate().year
        sequence = Staff.objects.count() + 1
        while True:
            candidate = f"EMP{year}{sequence:04d}"
            if not Staff.objects.filter(employee_id=candidate).exists():
                return candidate
            sequence += 1


class StaffAttendance(models.Model):
    """One attendance record per staff member per day."""

    STATUS_CHOICES = [
        ('present', 'Present'),
        ('absent', 'Absent'),
        ('late', 'Late'),
        ('half_day', 'Half Day'),
    ]

    staff = models.ForeignKey(Staff, on_delete=models.CASCADE, related_name='attendance')
    date = models.DateField()
    check_in = models.CharField(max_length=10, blank=True)
    check_out = models.CharField(max_length=10, blank=True)
    hours_worked = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='present')

    class Meta:
        db_table = 'staff_attendance'
        ordering = ['-date']
        verbose_name = 'Staff Attendance'
        verbose_name_plural = 'Staff Attendance'
        constraints = [
            models.UniqueConstraint(fields=['staff', 'date'], name='staff_attendance_one_per_day'),
        ]

    def __str__(self):
        return f"{self.staff.employee_id} {self.date} ({self.status})"

    def calculate_hours_worked(self):
        """Check-out minus check-in in hours, rounded to 2 decimals; None without both times."""
        start = parse_clock(self.check_in)
        end = parse_clock(self.check_out)
        if start is None or end is None:
            return None
        seconds = (
            datetime.combine(self.date, end) - datetime.combine(self.date, start)
        ).total_seconds()
        return Decimal(str(round(seconds / 3600, 2)))
