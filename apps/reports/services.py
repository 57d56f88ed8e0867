"""
Dashboard aggregator.

Read-only counts and sums over appointments, doctors, patients, bills,
inventory, admissions and staff. Nothing is cached; every call recomputes.
"""
import logging
from datetime import datetime, time, timedelta

from django.conf import settings
from django.db.models import Sum
from django.utils import timezone

from common.exceptions import ValidationError
from common.utils import parse_datetime_param

logger = logging.getLogger(__name__)

DATE_RANGES = ('today', 'week', 'month', 'quarter', 'year', 'custom')


def _midnight(day):
    return timezone.make_aware(datetime.combine(day, time.min))


def date_window(date_range, start_date=None, end_date=None, now=None):
    """
    Resolve a ``date_range`` bucket into ``(start, end)``.

    Either bound may be None (open). Weeks start on Sunday. An unknown
    bucket, or ``custom`` without both dates, means no window.
    """
    now = now or timezone.now()
    today = timezone.localtime(now).date()

    if date_range == 'today':
        return _midnight(today), _midnight(today + timedelta(days=1))
    if date_range == 'week':
        return _midnight(today - timedelta(days=(today.weekday() + 1) % 7)), None
    if date_range == 'month':
        start = today.replace(day=1)
        following = (start + timedelta(days=32)).replace(day=1)
        return _midnight(start), _midnight(following)
    if date_range == 'quarter':
        return _midnight(today.replace(month=(today.month - 1) // 3 * 3 + 1, day=1)), None
    if date_range == 'year':
        return _midnight(today.replace(month=1, day=1)), _midnight(today.replace(year=today.year + 1, month=1, day=1))
    if date_range == 'custom' and start_date and end_date:
        return parse_datetime_param(start_date, 'start_date'), parse_datetime_param(end_date, 'end_date')
    return None, None


def _within(queryset, field, start, end):
    if start is not None:
        queryset = queryset.filter(**{f'{field}__gte': start})
    if end is not None:
        queryset = queryset.filter(**{f'{field}__lt': end})
    return queryset


def _appointment_stats(start, end, now):
    from apps.appointments.models import Appointment

    appointments = _within(Appointment.objects.all(), 'booked_at', start, end or now)
    return {
        'total': appointments.count(),
        'pending': appointments.filter(is_completed=False, cancelled=False).count(),
        'completed': appointments.filter(is_completed=True).count(),
        'cancelled': appointments.filter(cancelled=True).count(),
    }


def _doctor_stats():
    from apps.doctors.models import Doctor

    available = Doctor.objects.filter(available=True).count()
    total = Doctor.objects.count()
    return {'total': total, 'available': available, 'busy': total - available}


def _patient_stats(now):
    from apps.patients.models import PatientProfile

    month_start = _midnight(timezone.localtime(now).date().replace(day=1))
    return {
        'total': PatientProfile.objects.count(),
        'new_this_month': PatientProfile.objects.filter(created_at__gte=month_start).count(),
    }


def _billing_stats(start, end):
    from apps.billing.models import Bill

    bills = _within(Bill.objects.all(), 'created_at', start, end)
    return {
        'total_revenue': bills.aggregate(total=Sum('total_amount'))['total'] or 0,
        'pending_payments': bills.filter(payment_status='pending').aggregate(total=Sum('total_amount'))['total'] or 0,
        'paid_bills': bills.filter(payment_status='paid').count(),
    }


def _inventory_stats(now):
    from apps.inventory.models import InventoryItem

    items = list(InventoryItem.objects.only('quantity', 'reorder_level', 'expiry_date'))
    expiring = 0
    for item in items:
        if item.expiry_date is None:
            continue
        days_left = item.days_until_expiry(now)
        if 0 < days_left <= settings.HMS_EXPIRY_WARNING_DAYS:
            expiring += 1
    return {
        'total_items': len(items),
        'low_stock': sum(1 for item in items if item.quantity <= item.reorder_level),
        'expiring': expiring,
    }


def _admission_stats(now):
    from apps.ipd.models import Admission
    from apps.ipd.services import available_rooms

    today = timezone.localtime(now).date()
    return {
        'current_admissions': Admission.objects.filter(status='admitted').count(),
        'discharged_today': _within(
            Admission.objects.filter(status='discharged'),
            'actual_discharge_date',
            _midnight(today),
            _midnight(today + timedelta(days=1)),
        ).count(),
        'total_rooms': settings.HMS_TOTAL_ROOMS,
        'occupied_rooms': available_rooms()['occupied_rooms'],
    }


def _staff_stats():
    from apps.staff.models import Staff

    return {
        'total_staff': Staff.objects.count(),
        'active_staff': Staff.objects.filter(status='active').count(),
    }


def dashboard(params, now=None):
    now = now or timezone.now()
    date_range = params.get('date_range') or 'month'
    if date_range not in DATE_RANGES:
        raise ValidationError(f"Invalid date range: {date_range}")

    start, end = date_window(date_range, params.get('start_date'), params.get('end_date'), now=now)
    logger.info(f"Dashboard report for {date_range}: {start} - {end}")

    return {
        'appointments': _appointment_stats(start, end, now),
        'doctors': _doctor_stats(),
        'patients': _patient_stats(now),
        'billing': _billing_stats(start, end),
        'inventory': _inventory_stats(now),
        'admissions': _admission_stats(now),
        'staff': _staff_stats(),
    }
