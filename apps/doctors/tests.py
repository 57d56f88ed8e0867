# apps/doctors/tests.py

from decimal import Decimal

from django.test import TestCase

from common.testing import JSONClient, admin_headers, doctor_headers, make_appointment, make_doctor, make_patient

from .models import Doctor


class DoctorApiTestCase(TestCase):
    """Doctor directory, availability and the doctor dashboard"""

    def setUp(self):
        self.client = JSONClient()
        self.url = '/api/doctors/'

    def test_admin_adds_doctor(self):
        response, data = self.client.post_json(self.url, {
            'name': 'Dr. Kavya Rao',
            'email': 'kavya@example.com',
            'password': 'doctor-pass',
            'speciality': 'Dermatologist',
            'degree': 'MD',
            'experience': '6 Years',
            'about': 'Skin care',
            'fees': 700,
            'address': '{"line1": "MG Road", "line2": "Bangalore"}',
        }, **admin_headers())

        self.assertEqual(data['message'], 'Doctor Added')
        doctor = Doctor.objects.get(pk=data['doctor_id'])
        self.assertEqual(doctor.address, {'line1': 'MG Road', 'line2': 'Bangalore'})
        self.assertTrue(doctor.check_password('doctor-pass'))

    def test_public_list_hides_credentials(self):
        make_doctor()
        data = self.client.get_json(self.url)[1]
        self.assertEqual(len(data['doctors']), 1)
        self.assertNotIn('password', data['doctors'][0])
        self.assertNotIn('email', data['doctors'][0])

    def test_change_availability(self):
        doctor = make_doctor()
        data = self.client.post_json(f'{self.url}{doctor.pk}/change-availability/', {}, **doctor_headers(doctor))[1]
        self.assertFalse(data['available'])

        other = make_doctor(name='Dr. Other', email='other@example.com')
        data = self.client.post_json(f'{self.url}{doctor.pk}/change-availability/', {}, **doctor_headers(other))[1]
        self.assertFalse(data['success'])

    def test_telemedicine_fees(self):
        doctor = make_doctor()
        data = self.client.post_json(
            f'{self.url}{doctor.pk}/telemedicine-fees/', {'emergency_fee': 250}, **admin_headers()
        )[1]
        self.assertEqual(data['message'], 'Doctor fees updated successfully')
        self.assertEqual(Doctor.objects.get(pk=doctor.pk).emergency_fee, Decimal('250'))

    def test_dashboard_earnings(self):
        doctor = make_doctor()
        patient = make_patient()
        make_appointment(patient, doctor, is_completed=True)
        make_appointment(patient, doctor, slot_time='11:00 AM', payment=True)
        make_appointment(patient, doctor, slot_time='11:30 AM')

        data = self.client.get_json(f'{self.url}dashboard/', **doctor_headers(doctor))[1]
        self.assertEqual(Decimal(str(data['dash_data']['earnings'])), Decimal('1000'))
        self.assertEqual(data['dash_data']['appointments'], 3)
        self.assertEqual(data['dash_data']['patients'], 1)

    def test_unknown_doctor(self):
        data = self.client.get_json(f'{self.url}9999/')[1]
        self.assertEqual(data['message'], 'Doctor not found')
