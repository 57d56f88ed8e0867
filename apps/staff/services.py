import logging

from django.db import transaction
from django.utils import timezone

from common.exceptions import NotFound, ValidationError
from common.utils import parse_json_field, require_fields, to_decimal, to_int

from .models import Staff, StaffAttendance

logger = logging.getLogger(__name__)


def get_staff(staff_id):
    try:
        return Staff.objects.get(pk=staff_id)
    except (Staff.DoesNotExist, ValueError, TypeError):
        raise NotFound('Staff member not found')


def _choice_key(value, choices, field_name, default=None):
    if value in (None, ''):
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    key = str(value).strip().lower().replace('-', '_').replace(' ', '_')
    if key not in {choice for choice, _ in choices}:
        raise ValidationError(f"Invalid {field_name}: {value}")
    return key


def add_staff(data):
    require_fields(
        data,
        ['name', 'email', 'phone', 'role', 'department', 'qualification', 'experience', 'salary'],
    )
    if Staff.objects.filter(email__iexact=data['email']).exists():
        raise ValidationError('Staff member already exists')

    staff = Staff(
        name=data['name'],
        email=data['email'],
        phone=data['phone'],
        role=_choice_key(data['role'], Staff.ROLE_CHOICES, 'role'),
        department=data['department'],
        qualification=data['qualification'],
        experience=to_int(data['experience'], 'experience'),
        salary=to_decimal(data['salary'], 'salary'),
        address=parse_json_field(data.get('address'), 'address', default={}),
        emergency_contact=parse_json_field(data.get('emergency_contact'), 'emergency_contact', default={}),
        shifts=parse_json_field(data.get('shifts'), 'shifts', default=[]),
        image=data.get('image') or '',
    )
    staff.save()
    logger.info(f"Staff {staff.employee_id} added: {staff.name} ({staff.role})")
    return staff


def update_staff(staff, data):
    from .serializers import StaffUpdateSerializer

    payload = {key: data[key] for key in StaffUpdateSerializer.Meta.fields if key in data}
    for key, default in (('address', {}), ('emergency_contact', {}), ('shifts', []), ('leave_balance', {})):
        if key in payload:
            payload[key] = parse_json_field(payload[key], key, default=default)

    serializer = StaffUpdateSerializer(staff, data=payload, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    logger.info(f"Staff {staff.employee_id} updated: {sorted(payload)}")
    return staff


@transaction.atomic
def mark_attendance(staff, check_in=None, check_out=None, status=None, day=None):
    """
    Create or update today's attendance record.

    An existing record keeps its check-in and status unless new values are
    sent; hours are recomputed whenever both times are known.
    """
    day = day or timezone.localdate()
    status = _choice_key(status, StaffAttendance.STATUS_CHOICES, 'status', default='present') if status else None

    record, created = StaffAttendance.objects.get_or_create(
        staff=staff,
        date=day,
        defaults={
            'check_in': check_in or '',
            'check_out': check_out or '',
            'status': status or 'present',
        },
    )
    if not created:
        record.check_in = check_in or record.check_in
        record.check_out = check_out or record.check_out
        record.status = status or record.status

    hours = record.calculate_hours_worked()
    if hours is not None:
        record.hours_worked = hours
    record.save()

    logger.info(f"Attendance for {staff.employee_id} on {day}: {record.status}, {record.hours_worked}h")
    return record


def attendance_history(staff, month=None, year=None):
    records = staff.attendance.all()
    month = to_int(month, 'month')
    year = to_int(year, 'year')
    if month and year:
        records = records.filter(date__month=month, date__year=year)
    return records
