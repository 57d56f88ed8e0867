"""
Bill creation, edits and the two payment paths.

Ledger payments (amount + method) append a BillPayment row and the bill's
status is re-derived from the ledger. The one-shot path (bare status, or a
patient paying a bill from the portal) writes ``payment_status`` straight
to the row; the next full save of the bill derives it from the ledger again.
"""
import logging
from datetime import timedelta
from decimal import Decimal

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Sum
from django.db.models.functions import ExtractMonth, ExtractYear
from django.utils import timezone

from common.exceptions import NotFound, ValidationError
from common.utils import parse_datetime_param, parse_json_field, to_decimal, to_int

from .models import Bill, BillPayment, BillService

logger = logging.getLogger(__name__)

PENDING_STATUSES = ('pending', 'partial')


def get_bill(bill_id):
    try:
        return Bill.objects.select_related('patient', 'doctor').get(pk=bill_id)
    except (Bill.DoesNotExist, ValueError, TypeError):
        raise NotFound('Bill not found')


def _choice_key(value, choices, default):
    if value in (None, ''):
        return default
    key = str(value).strip().lower().replace('-', '_').replace(' ', '_')
    if key not in {choice for choice, _ in choices}:
        raise ValidationError(f"Invalid value: {value}")
    return key


def normalize_services(services=None, items=None):
    """
    Service lines from either a ``services`` payload or a generic ``items``
    payload (``description`` / ``quantity`` / ``unit_price`` / ``amount``).
    """
    lines = []
    if services not in (None, ''):
        for entry in parse_json_field(services, 'services', default=[]) or []:
            if not entry.get('service_name'):
                raise ValidationError('service_name is required for every service')
            lines.append({
                'service_name': entry['service_name'],
                'service_code': entry.get('service_code') or '',
                'category': _choice_key(entry.get('category'), BillService.CATEGORY_CHOICES, 'other'),
                'quantity': to_int(entry.get('quantity'), 'quantity', default=1),
                'unit_price': to_decimal(entry.get('unit_price'), 'unit_price', default=Decimal('0')),
                'discount': to_decimal(entry.get('discount'), 'discount', default=Decimal('0')),
                'tax': to_decimal(entry.get('tax'), 'tax', default=Decimal('0')),
            })
    elif items:
        for item in parse_json_field(items, 'items', default=[]) or []:
            quantity = to_int(item.get('quantity'), 'quantity', default=1) or 1
            unit_price = to_decimal(item.get('unit_price'), 'unit_price')
            if unit_price is None:
                unit_price = to_decimal(item.get('amount'), 'amount', default=Decimal('0')) / quantity
            lines.append({
                'service_name': item.get('description') or 'Service',
                'service_code': '',
                'category': 'other',
                'quantity': quantity,
                'unit_price': unit_price,
                'discount': Decimal('0'),
                'tax': Decimal('0'),
            })
    return lines


@transaction.atomic
def create_bill(data):
    """Create a bill for a patient; totals come from the service lines only."""
    from apps.doctors.models import Doctor
    from apps.patients.models import PatientProfile

    try:
        patient = PatientProfile.objects.get(pk=data.get('patient_id'))
    except (PatientProfile.DoesNotExist, ValueError, TypeError):
        raise NotFound('Patient not found')

    doctor = None
    if data.get('doctor_id'):
        doctor = Doctor.objects.filter(pk=data.get('doctor_id')).first()

    appointment_id = data.get('appointment_id') or None
    now = timezone.now()

    bill = Bill(
        patient=patient,
        patient_name=patient.name,
        patient_contact=patient.phone,
        bill_type=_choice_key(data.get('bill_type'), Bill.BILL_TYPE_CHOICES, 'opd'),
        appointment_id=appointment_id,
        admission_code=data.get('admission_id') or '',
        doctor=doctor,
        doctor_name=doctor.name if doctor else '',
        insurance=parse_json_field(data.get('insurance'), 'insurance', default=None) or {'has_insurance': False},
        notes=data.get('notes') or '',
        generated_by=data.get('generated_by') or 'System',
        billing_date=now,
        due_date=now + timedelta(days=settings.HMS_BILL_DUE_DAYS),
    )
    bill.save()

    for line in normalize_services(data.get('services'), data.get('items')):
        BillService.objects.create(bill=bill, **line)

    bill.refresh_from_db()
    logger.info(f"Bill {bill.bill_number} created for patient {patient.pk}: total {bill.total_amount}")
    return bill


UPDATABLE_FIELDS = ['bill_type', 'notes', 'generated_by', 'due_date', 'payment_method', 'admission_code']


@transaction.atomic
def update_bill(bill, data):
    """
    Apply an edit. A ``services`` payload replaces the service lines; totals
    and status are re-derived either way.
    """
    from .serializers import BillUpdateSerializer

    payload = {key: data[key] for key in UPDATABLE_FIELDS if key in data}
    if 'insurance' in data:
        payload['insurance'] = parse_json_field(data['insurance'], 'insurance', default={})

    serializer = BillUpdateSerializer(bill, data=payload, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()

    if 'services' in data:
        lines = normalize_services(data.get('services'))
        bill.services.all().delete()
        for line in lines:
            BillService.objects.create(bill=bill, **line)

    bill.refresh_from_db()
    logger.info(f"Bill {bill.bill_number} updated")
    return bill


def record_payment(bill, amount, payment_method, transaction_id=None):
    """Append a successful ledger payment; the signal re-derives the bill status."""
    method = _choice_key(payment_method, BillPayment.METHOD_CHOICES, None)
    payment = BillPayment.objects.create(
        bill=bill,
        amount=amount,
        payment_method=method,
        transaction_id=transaction_id or '',
        payment_date=timezone.now(),
        status='success',
    )
    bill.refresh_from_db()
    logger.info(
        f"Payment {payment.payment_id} of {amount} recorded on bill {bill.bill_number}, "
        f"status now {bill.payment_status}"
    )
    return payment


def set_payment_status(bill, payment_status, payment_method=None, paid_date=None):
    """One-shot status write; bypasses the ledger derivation."""
    fields = {'payment_status': payment_status, 'updated_at': timezone.now()}
    if payment_method:
        fields['payment_method'] = payment_method
    if paid_date:
        fields['paid_date'] = paid_date
    Bill.objects.filter(pk=bill.pk).update(**fields)
    bill.refresh_from_db()
    logger.info(f"Bill {bill.bill_number} payment status set to {payment_status}")
    return bill


def process_payment(bill, data):
    """
    Either append a ledger payment (``amount`` + ``payment_method``) or set a
    bare ``payment_status``. Returns (message, payment_id or None).
    """
    amount = to_decimal(data.get('amount'), 'amount')
    payment_status = data.get('payment_status')

    if payment_status and not amount:
        status = _choice_key(payment_status, Bill.PAYMENT_STATUS_CHOICES, None)
        set_payment_status(bill, status)
        return 'Payment status updated successfully', None

    if amount and data.get('payment_method'):
        payment = record_payment(bill, amount, data.get('payment_method'), data.get('transaction_id'))
        return 'Payment processed successfully', payment.payment_id

    raise ValidationError('Invalid request data')


def pay_bill(bill, patient_id, payment_method=None):
    """Patient portal payment of a whole bill."""
    if bill.patient_id != patient_id:
        raise NotFound('Bill not found')
    if bill.payment_status == 'paid':
        raise ValidationError('Bill already paid')

    method = _choice_key(payment_method, Bill.PAYMENT_METHOD_CHOICES, 'dummy_payment')
    return set_payment_status(bill, 'paid', payment_method=method, paid_date=timezone.now())


def financial_report(params):
    """
    Revenue (paid bills grouped by year / month / bill type) and pending
    (pending or partial bills) sections; ``report_type`` picks one.
    """
    queryset = Bill.objects.all()
    start = parse_datetime_param(params.get('start_date'), 'start_date')
    end = parse_datetime_param(params.get('end_date'), 'end_date')
    if start and end:
        queryset = queryset.filter(billing_date__gte=start, billing_date__lte=end)

    report_type = params.get('report_type')
    report = {}

    if report_type in (None, '', 'revenue'):
        paid = queryset.filter(payment_status='paid')
        breakdown = (
            paid.annotate(year=ExtractYear('billing_date'), month=ExtractMonth('billing_date'))
            .values('year', 'month', 'bill_type')
            .annotate(total_amount=Sum('total_amount'), count=Count('id'))
            .order_by('year', 'month', 'bill_type')
        )
        totals = paid.aggregate(total=Sum('total_amount'), count=Count('id'))
        report['revenue'] = {
            'breakdown': list(breakdown),
            'total': {'total': totals['total'] or Decimal('0'), 'count': totals['count']},
        }

    if report_type in (None, '', 'pending'):
        pending = queryset.filter(payment_status__in=PENDING_STATUSES).order_by('-billing_date')
        totals = pending.aggregate(total=Sum('total_amount'), count=Count('id'))
        report['pending'] = {
            'bills': list(pending.values(
                'id', 'bill_number', 'patient_name', 'total_amount',
                'payment_status', 'billing_date', 'due_date'
            )),
            'summary': {'total': totals['total'] or Decimal('0'), 'count': totals['count']},
        }

    return report
