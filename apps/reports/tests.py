# apps/reports/tests.py

from datetime import datetime, timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from apps.billing import services as billing
from apps.billing.models import Bill
from apps.inventory.models import InventoryItem
from apps.staff.models import Staff
from common.exceptions import ValidationError
from common.testing import JSONClient, admin_headers, doctor_headers, make_appointment, make_doctor, make_patient

from . import services

# Saturday
NOW = timezone.make_aware(datetime(2024, 6, 15, 12, 0))


def local(year, month, day, hour=9):
    return timezone.make_aware(datetime(year, month, day, hour, 0))


class DateWindowTestCase(TestCase):

    def test_today(self):
        start, end = services.date_window('today', now=NOW)
        self.assertEqual(start, local(2024, 6, 15, 0))
        self.assertEqual(end, local(2024, 6, 16, 0))

    def test_week_starts_on_sunday(self):
        start, end = services.date_window('week', now=NOW)
        self.assertEqual(start, local(2024, 6, 9, 0))
        self.assertIsNone(end)

    def test_month_quarter_year(self):
        self.assertEqual(services.date_window('month', now=NOW), (local(2024, 6, 1, 0), local(2024, 7, 1, 0)))
        self.assertEqual(services.date_window('quarter', now=NOW), (local(2024, 4, 1, 0), None))
        self.assertEqual(services.date_window('year', now=NOW), (local(2024, 1, 1, 0), local(2025, 1, 1, 0)))

    def test_custom_needs_both_dates(self):
        self.assertEqual(services.date_window('custom', '2024-01-01', None, now=NOW), (None, None))
        start, end = services.date_window('custom', '2024-01-01', '2024-02-01', now=NOW)
        self.assertEqual(start, local(2024, 1, 1, 0))
        self.assertEqual(end, local(2024, 2, 1, 0))


class DashboardTestCase(TestCase):

    def setUp(self):
        self.patient = make_patient(created_at=local(2024, 6, 2))
        make_patient(name='Old Patient', email='old@example.com', created_at=local(2024, 3, 2))
        self.doctor = make_doctor()
        make_doctor(name='Dr. Busy', email='busy@example.com', available=False)

        make_appointment(self.patient, self.doctor, booked_at=local(2024, 6, 3))
        make_appointment(self.patient, self.doctor, booked_at=local(2024, 6, 4), is_completed=True)
        make_appointment(self.patient, self.doctor, booked_at=local(2024, 6, 5), cancelled=True)
        make_appointment(self.patient, self.doctor, booked_at=local(2024, 4, 5))

        paid = billing.create_bill({
            'patient_id': self.patient.pk,
            'services': [{'service_name': 'Surgery', 'unit_price': 1000}],
        })
        billing.record_payment(paid, Decimal('1000'), 'cash')
        billing.create_bill({
            'patient_id': self.patient.pk,
            'services': [{'service_name': 'Consultation', 'unit_price': 300}],
        })
        Bill.objects.update(created_at=local(2024, 6, 10))

        InventoryItem.objects.create(
            item_name='Saline', category='medicines', unit_price=Decimal('20'), quantity=2,
            reorder_level=10, max_stock_level=100, unit='bottles'
        )
        InventoryItem.objects.create(
            item_name='Insulin', category='medicines', unit_price=Decimal('300'), quantity=50,
            reorder_level=10, max_stock_level=100, unit='vials', expiry_date=NOW + timedelta(days=5)
        )

        Staff.objects.create(
            name='Meena', email='meena@example.com', phone='1', role='nurse', department='ICU',
            qualification='BSc', experience=2, salary=Decimal('30000')
        )
        Staff.objects.create(
            name='Ravi', email='ravi@example.com', phone='2', role='support_staff', department='Admin',
            qualification='BA', experience=1, salary=Decimal('20000'), status='terminated'
        )

    def test_month_dashboard(self):
        data = services.dashboard({}, now=NOW)

        self.assertEqual(data['appointments'], {'total': 3, 'pending': 1, 'completed': 1, 'cancelled': 1})
        self.assertEqual(data['doctors'], {'total': 2, 'available': 1, 'busy': 1})
        self.assertEqual(data['patients'], {'total': 2, 'new_this_month': 1})
        self.assertEqual(data['billing']['total_revenue'], Decimal('1300'))
        self.assertEqual(data['billing']['pending_payments'], Decimal('300'))
        self.assertEqual(data['billing']['paid_bills'], 1)
        self.assertEqual(data['inventory'], {'total_items': 2, 'low_stock': 1, 'expiring': 1})
        self.assertEqual(data['admissions']['current_admissions'], 0)
        self.assertEqual(data['admissions']['total_rooms'], 100)
        self.assertEqual(data['admissions']['occupied_rooms'], 0)
        self.assertEqual(data['staff'], {'total_staff': 2, 'active_staff': 1})

    def test_year_dashboard_includes_older_appointments(self):
        data = services.dashboard({'date_range': 'year'}, now=NOW)
        self.assertEqual(data['appointments']['total'], 4)

    def test_invalid_range(self):
        with self.assertRaises(ValidationError):
            services.dashboard({'date_range': 'decade'}, now=NOW)


class ReportApiTestCase(TestCase):

    def setUp(self):
        self.client = JSONClient()

    def test_dashboard(self):
        data = self.client.get_json('/api/reports/dashboard/', {'date_range': 'today'}, **admin_headers())[1]
        self.assertTrue(data['success'])
        self.assertEqual(
            sorted(data['data']),
            ['admissions', 'appointments', 'billing', 'doctors', 'inventory', 'patients', 'staff']
        )

    def test_export_is_client_side(self):
        data = self.client.get_json('/api/reports/export/', **admin_headers())[1]
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Report export is generated client-side')

    def test_admin_only(self):
        data = self.client.get_json('/api/reports/dashboard/', **doctor_headers(make_doctor()))[1]
        self.assertFalse(data['success'])
