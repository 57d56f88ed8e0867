# apps/appointments/tests.py

from django.test import TestCase

from apps.doctors.models import Doctor
from common.testing import (
    JSONClient, admin_headers, doctor_headers, make_appointment, make_doctor, make_patient, patient_headers
)

from .models import Appointment


class AppointmentApiTestCase(TestCase):
    """Booking, cancellation and completion"""

    def setUp(self):
        self.client = JSONClient()
        self.patient = make_patient()
        self.doctor = make_doctor()
        self.url = '/api/appointments/'

    def _book(self, slot_time='10:30 AM', patient=None):
        return self.client.post_json(self.url, {
            'doc_id': self.doctor.pk,
            'slot_date': '20_1_2024',
            'slot_time': slot_time,
        }, **patient_headers(patient or self.patient))

    def test_book_takes_slot_and_snapshots(self):
        response, data = self._book()
        self.assertEqual(data['message'], 'Appointment Booked')

        appointment = Appointment.objects.get()
        self.assertEqual(appointment.doctor_data['name'], self.doctor.name)
        self.assertEqual(appointment.patient_data['email'], self.patient.email)
        self.assertEqual(appointment.amount, self.doctor.fees)
        self.assertEqual(Doctor.objects.get(pk=self.doctor.pk).slots_booked, {'20_1_2024': ['10:30 AM']})

    def test_slot_cannot_be_booked_twice(self):
        self._book()
        other = make_patient(name='Other', email='other@example.com')
        data = self._book(patient=other)[1]
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Slot Not Available')

    def test_unavailable_doctor(self):
        self.doctor.available = False
        self.doctor.save()
        data = self._book()[1]
        self.assertEqual(data['message'], 'Doctor Not Available')

    def test_missing_fields(self):
        data = self.client.post_json(self.url, {'doc_id': self.doctor.pk}, **patient_headers(self.patient))[1]
        self.assertEqual(data['message'], 'Missing required fields')

    def test_cancel_releases_slot(self):
        self._book()
        appointment = Appointment.objects.get()

        data = self.client.post_json(f'{self.url}{appointment.pk}/cancel/', {}, **patient_headers(self.patient))[1]
        self.assertEqual(data['message'], 'Appointment Cancelled')
        self.assertTrue(Appointment.objects.get().cancelled)
        self.assertEqual(Doctor.objects.get(pk=self.doctor.pk).slots_booked, {'20_1_2024': []})

    def test_other_patient_cannot_cancel(self):
        appointment = make_appointment(self.patient, self.doctor)
        other = make_patient(name='Other', email='other@example.com')
        data = self.client.post_json(f'{self.url}{appointment.pk}/cancel/', {}, **patient_headers(other))[1]
        self.assertFalse(data['success'])

    def test_doctor_completes_own_appointment(self):
        appointment = make_appointment(self.patient, self.doctor)
        other = make_doctor(name='Dr. Other', email='other@example.com')

        data = self.client.post_json(f'{self.url}{appointment.pk}/complete/', {}, **doctor_headers(other))[1]
        self.assertEqual(data['message'], 'Mark Failed')

        data = self.client.post_json(f'{self.url}{appointment.pk}/complete/', {}, **doctor_headers(self.doctor))[1]
        self.assertEqual(data['message'], 'Appointment Completed')
        self.assertTrue(Appointment.objects.get().is_completed)

    def test_pay(self):
        appointment = make_appointment(self.patient, self.doctor)
        data = self.client.post_json(f'{self.url}{appointment.pk}/pay/', {}, **patient_headers(self.patient))[1]
        self.assertTrue(data['success'])
        self.assertTrue(Appointment.objects.get().payment)

    def test_lists_are_scoped_by_role(self):
        make_appointment(self.patient, self.doctor)
        other_patient = make_patient(name='Other', email='other@example.com')
        make_appointment(other_patient, self.doctor, slot_time='11:00 AM')

        data = self.client.get_json(self.url, **patient_headers(self.patient))[1]
        self.assertEqual(len(data['appointments']), 1)

        data = self.client.get_json(self.url, **doctor_headers(self.doctor))[1]
        self.assertEqual(len(data['appointments']), 2)

        data = self.client.get_json(f'{self.url}dashboard/', **admin_headers())[1]
        self.assertEqual(data['dash_data']['appointments'], 2)
        self.assertEqual(data['dash_data']['patients'], 2)
