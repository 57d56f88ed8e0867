# apps/billing/tests.py

from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from django.test import TestCase

from common.testing import JSONClient, admin_headers, make_doctor, make_patient, patient_headers

from . import services
from .models import Bill, BillPayment, BillService


class BillTotalsTestCase(TestCase):
    """Totals derived from the service lines"""

    def setUp(self):
        self.patient = make_patient()

    def _bill(self, **data):
        payload = {'patient_id': self.patient.pk}
        payload.update(data)
        return services.create_bill(payload)

    def test_two_service_lines(self):
        bill = self._bill(services=[
            {'service_name': 'Consultation', 'unit_price': 100, 'quantity': 2, 'discount': 10, 'tax': 5},
            {'service_name': 'Dressing', 'unit_price': 50, 'quantity': 1},
        ])

        self.assertEqual(bill.subtotal, Decimal('250.00'))
        self.assertEqual(bill.total_discount, Decimal('10.00'))
        self.assertEqual(bill.total_tax, Decimal('5.00'))
        self.assertEqual(bill.total_amount, Decimal('245.00'))
        self.assertEqual(
            sorted(bill.services.values_list('total_price', flat=True)),
            [Decimal('50.00'), Decimal('200.00')]
        )
        self.assertEqual(bill.payment_status, 'pending')

    def test_stored_totals_are_overwritten_on_save(self):
        bill = self._bill()
        bill.subtotal = Decimal('999.00')
        bill.total_amount = Decimal('999.00')
        bill.save()
        bill.refresh_from_db()

        self.assertEqual(bill.subtotal, Decimal('0'))
        self.assertEqual(bill.total_discount, Decimal('0'))
        self.assertEqual(bill.total_tax, Decimal('0'))
        self.assertEqual(bill.total_amount, Decimal('0'))

    def test_generic_items_are_mapped_to_services(self):
        bill = self._bill(items=[{'description': 'X-Ray', 'quantity': 2, 'unit_price': 300}])
        line = bill.services.get()

        self.assertEqual(line.service_name, 'X-Ray')
        self.assertEqual(line.category, 'other')
        self.assertEqual(line.total_price, Decimal('600.00'))
        self.assertEqual(bill.total_amount, Decimal('600.00'))

    def test_removing_a_line_updates_totals(self):
        bill = self._bill(services=[
            {'service_name': 'Consultation', 'unit_price': 100},
            {'service_name': 'Dressing', 'unit_price': 50},
        ])
        bill.services.get(service_name='Dressing').delete()
        bill.refresh_from_db()
        self.assertEqual(bill.total_amount, Decimal('100.00'))

    def test_bill_number_format_and_due_date(self):
        bill = self._bill()
        second = self._bill()

        self.assertRegex(bill.bill_number, r'^BILL\d{4}\d{2}\d{4}$')
        self.assertNotEqual(bill.bill_number, second.bill_number)
        self.assertEqual((bill.due_date - bill.billing_date).days, 30)
        self.assertEqual(bill.generated_by, 'System')

    def test_unknown_patient(self):
        from common.exceptions import NotFound

        with self.assertRaises(NotFound):
            services.create_bill({'patient_id': 9999})


class BillPaymentStatusTestCase(TestCase):
    """Payment status derived from the ledger"""

    def setUp(self):
        self.patient = make_patient()
        self.bill = services.create_bill({
            'patient_id': self.patient.pk,
            'services': [{'service_name': 'Surgery', 'unit_price': 1000}],
        })

    def test_status_follows_cumulative_payments(self):
        self.assertEqual(self.bill.payment_status, 'pending')

        services.record_payment(self.bill, Decimal('400'), 'cash')
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.payment_status, 'partial')

        services.record_payment(self.bill, Decimal('600'), 'upi')
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.payment_status, 'paid')
        self.assertEqual(self.bill.total_paid, Decimal('1000.00'))

    def test_failed_payments_do_not_count(self):
        BillPayment.objects.create(bill=self.bill, amount=Decimal('1000'), payment_method='card', status='failed')
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.payment_status, 'pending')

    def test_payment_id_and_transaction_default(self):
        payment = services.record_payment(self.bill, Decimal('10'), 'cash')
        self.assertRegex(payment.payment_id, r'^PAY\d+$')
        self.assertEqual(payment.transaction_id, payment.payment_id)

    def test_direct_status_is_rederived_on_next_full_save(self):
        services.set_payment_status(self.bill, 'paid')
        self.assertEqual(self.bill.payment_status, 'paid')

        BillService.objects.create(bill=self.bill, service_name='Dressing', unit_price=Decimal('50'))
        self.bill.refresh_from_db()
        self.assertEqual(self.bill.payment_status, 'pending')


class BillApiTestCase(TestCase):
    """Billing endpoints"""

    def setUp(self):
        self.client = JSONClient()
        self.patient = make_patient()
        self.doctor = make_doctor()
        self.url = '/api/bills/'

    def _create(self, **data):
        payload = {
            'patient_id': self.patient.pk,
            'doctor_id': self.doctor.pk,
            'bill_type': 'ipd',
            'services': [{'service_name': 'Room', 'category': 'room_charges', 'unit_price': 1500, 'quantity': 2}],
        }
        payload.update(data)
        return self.client.post_json(self.url, payload, **admin_headers())

    def test_create_and_get(self):
        response, data = self._create()
        self.assertEqual(data['message'], 'Bill created successfully')

        response, data = self.client.get_json(f"{self.url}{data['bill_id']}/", **admin_headers())
        bill = data['bill']
        self.assertEqual(bill['doctor_name'], self.doctor.name)
        self.assertEqual(Decimal(bill['total_amount']), Decimal('3000'))
        self.assertEqual(len(bill['services']), 1)

    def test_ledger_payment(self):
        bill_id = self._create()[1]['bill_id']
        response, data = self.client.post_json(
            f'{self.url}{bill_id}/payment/', {'amount': 1000, 'payment_method': 'cash'}, **admin_headers()
        )
        self.assertEqual(data['message'], 'Payment processed successfully')
        self.assertTrue(data['payment_id'].startswith('PAY'))
        self.assertEqual(Bill.objects.get(pk=bill_id).payment_status, 'partial')

    def test_bare_status_update(self):
        bill_id = self._create()[1]['bill_id']
        response, data = self.client.put_json(
            f'{self.url}{bill_id}/payment/', {'payment_status': 'overdue'}, **admin_headers()
        )
        self.assertEqual(data['message'], 'Payment status updated successfully')
        self.assertEqual(Bill.objects.get(pk=bill_id).payment_status, 'overdue')

    def test_payment_without_amount_or_status(self):
        bill_id = self._create()[1]['bill_id']
        response, data = self.client.post_json(
            f'{self.url}{bill_id}/payment/', {'payment_method': 'cash'}, **admin_headers()
        )
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Invalid request data')

    def test_patient_pays_own_bill_once(self):
        bill_id = self._create()[1]['bill_id']

        response, data = self.client.post_json(f'{self.url}{bill_id}/pay/', {}, **patient_headers(self.patient))
        self.assertTrue(data['success'])
        bill = Bill.objects.get(pk=bill_id)
        self.assertEqual(bill.payment_status, 'paid')
        self.assertEqual(bill.payment_method, 'dummy_payment')
        self.assertIsNotNone(bill.paid_date)

        response, data = self.client.post_json(f'{self.url}{bill_id}/pay/', {}, **patient_headers(self.patient))
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Bill already paid')

    def test_patient_bill_views(self):
        self._create()
        other = make_patient(name='Other', email='other@example.com')
        self._create(patient_id=other.pk)

        data = self.client.get_json(f'{self.url}my-bills/', **patient_headers(self.patient))[1]
        self.assertEqual(len(data['bills']), 1)

        data = self.client.get_json(f'{self.url}patient/{other.pk}/', **admin_headers())[1]
        self.assertEqual(len(data['bills']), 1)

    def test_list_filters(self):
        self._create()
        self._create(bill_type='opd')
        Bill.objects.filter(bill_type='opd').update(
            billing_date=datetime(2024, 1, 10, 6, tzinfo=dt_timezone.utc), payment_status='paid'
        )

        data = self.client.get_json(self.url, {'bill_type': 'ipd'}, **admin_headers())[1]
        self.assertEqual([row['bill_type'] for row in data['bills']], ['ipd'])

        data = self.client.get_json(self.url, {'status': 'paid', 'bill_type': 'All'}, **admin_headers())[1]
        self.assertEqual([row['bill_type'] for row in data['bills']], ['opd'])

        data = self.client.get_json(
            self.url, {'start_date': '2024-01-01', 'end_date': '2024-01-31T23:59:59'}, **admin_headers()
        )[1]
        self.assertEqual(len(data['bills']), 1)

        data = self.client.get_json(self.url, {'status': 'All'}, **admin_headers())[1]
        self.assertEqual(len(data['bills']), 2)

    def test_patient_cannot_list_all_bills(self):
        response, data = self.client.get_json(self.url, **patient_headers(self.patient))
        self.assertFalse(data['success'])
        self.assertEqual(data['code'], 'forbidden')

    def test_update_replaces_services(self):
        bill_id = self._create()[1]['bill_id']
        response, data = self.client.put_json(
            f'{self.url}{bill_id}/',
            {'services': [{'service_name': 'Consultation', 'unit_price': 500}], 'notes': 'Revised'},
            **admin_headers()
        )
        self.assertTrue(data['success'])
        self.assertEqual(Decimal(data['bill']['total_amount']), Decimal('500'))
        self.assertEqual(data['bill']['notes'], 'Revised')

    def test_financial_report(self):
        paid_id = self._create()[1]['bill_id']
        self.client.post_json(f'{self.url}{paid_id}/payment/', {'amount': 3000, 'payment_method': 'card'}, **admin_headers())
        self._create()

        data = self.client.get_json(f'{self.url}report/', **admin_headers())[1]
        report = data['report']
        self.assertEqual(report['revenue']['total']['count'], 1)
        self.assertEqual(Decimal(str(report['revenue']['total']['total'])), Decimal('3000'))
        self.assertEqual(report['revenue']['breakdown'][0]['bill_type'], 'ipd')
        self.assertEqual(report['pending']['summary']['count'], 1)

        data = self.client.get_json(f'{self.url}report/', {'report_type': 'pending'}, **admin_headers())[1]
        self.assertNotIn('revenue', data['report'])

    def test_delete(self):
        bill_id = self._create()[1]['bill_id']
        response, data = self.client.delete_json(f'{self.url}{bill_id}/', **admin_headers())
        self.assertEqual(data['message'], 'Bill deleted successfully')
        self.assertFalse(Bill.objects.exists())
        self.assertFalse(BillService.objects.exists())
