# apps/patients/tests.py

from datetime import date

from django.test import TestCase

from common.exceptions import NotFound
from common.testing import JSONClient, admin_headers, make_patient, patient_headers

from .models import PatientProfile, age_from_dob
from .services import get_patient_or_404


class AgeFromDobTestCase(TestCase):

    def test_birthday_not_reached(self):
        self.assertEqual(age_from_dob('20_08_1990', today=date(2024, 8, 19)), 33)
        self.assertEqual(age_from_dob('20_08_1990', today=date(2024, 8, 20)), 34)

    def test_missing_or_malformed(self):
        self.assertIsNone(age_from_dob(''))
        self.assertIsNone(age_from_dob('1990-08-20'))


class PatientLookupTestCase(TestCase):

    def test_found(self):
        patient = make_patient()
        self.assertEqual(get_patient_or_404(patient.pk), patient)

    def test_unknown_or_malformed_id(self):
        with self.assertRaisesMessage(NotFound, 'Patient not found'):
            get_patient_or_404(9999)
        with self.assertRaisesMessage(NotFound, 'Patient not found'):
            get_patient_or_404('abc')


class PatientApiTestCase(TestCase):

    def setUp(self):
        self.client = JSONClient()
        self.patient = make_patient()
        self.url = '/api/patients/'

    def test_profile(self):
        data = self.client.get_json(f'{self.url}profile/', **patient_headers(self.patient))[1]
        self.assertEqual(data['user_data']['email'], self.patient.email)
        self.assertNotIn('password', data['user_data'])

    def test_update_profile(self):
        response, data = self.client.post_json(f'{self.url}update-profile/', {
            'name': 'Asha V',
            'phone': '9000000001',
            'dob': '20_08_1990',
            'gender': 'female',
            'address': '{"line1": "5th Main"}',
        }, **patient_headers(self.patient))
        self.assertEqual(data['message'], 'Profile Updated')

        patient = PatientProfile.objects.get(pk=self.patient.pk)
        self.assertEqual(patient.name, 'Asha V')
        self.assertEqual(patient.address, {'line1': '5th Main'})

    def test_update_profile_missing_data(self):
        data = self.client.post_json(
            f'{self.url}update-profile/', {'name': 'Asha'}, **patient_headers(self.patient)
        )[1]
        self.assertEqual(data['message'], 'Data Missing')

    def test_bad_dob(self):
        data = self.client.post_json(f'{self.url}update-profile/', {
            'name': 'Asha', 'phone': '9', 'dob': '1990-08-20', 'gender': 'female',
        }, **patient_headers(self.patient))[1]
        self.assertEqual(data['message'], 'Date of birth must be DD_MM_YYYY')

    def test_admin_lists_patients(self):
        make_patient(name='Other', email='other@example.com')
        data = self.client.get_json(self.url, **admin_headers())[1]
        self.assertEqual(data['count'], 2)

        data = self.client.get_json(self.url, **patient_headers(self.patient))[1]
        self.assertFalse(data['success'])
