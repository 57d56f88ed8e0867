# apps/prescriptions/tests.py

from django.test import TestCase

from common.exceptions import Forbidden, ValidationError
from common.testing import (
    JSONClient, admin_headers, doctor_headers, make_appointment, make_doctor, make_patient, patient_headers
)

from . import services
from .models import Prescription

MEDICATIONS = [
    {'name': 'Amoxicillin', 'dosage': '500mg', 'frequency': 'Thrice daily', 'duration': '5 days'},
    {'name': 'Paracetamol', 'dosage': '650mg', 'frequency': 'SOS', 'duration': '3 days',
     'instructions': 'After food'},
]


class PrescriptionServiceTestCase(TestCase):

    def setUp(self):
        self.patient = make_patient()
        self.doctor = make_doctor()
        self.appointment = make_appointment(self.patient, self.doctor)

    def _data(self, **extra):
        data = {'appointment_id': self.appointment.pk, 'diagnosis': 'Tonsillitis', 'medications': MEDICATIONS}
        data.update(extra)
        return data

    def test_create_snapshots_and_completes_appointment(self):
        prescription = services.create_prescription(self.doctor.pk, self._data(lab_tests=['CBC']))

        self.assertEqual(prescription.medications.count(), 2)
        self.assertEqual(prescription.patient_data['name'], 'Asha Verma')
        self.assertEqual(prescription.patient_data['age'], 'N/A')
        self.assertEqual(prescription.doctor_data['speciality'], 'General physician')
        self.assertEqual(prescription.appointment_data['slot_date'], '20_1_2024')
        self.assertEqual(prescription.lab_tests, ['CBC'])
        self.assertEqual(prescription.status, 'active')

        self.appointment.refresh_from_db()
        self.assertTrue(self.appointment.is_completed)

    def test_one_prescription_per_appointment(self):
        services.create_prescription(self.doctor.pk, self._data())
        with self.assertRaisesMessage(ValidationError, 'Prescription already exists for this appointment'):
            services.create_prescription(self.doctor.pk, self._data())

    def test_other_doctor_cannot_prescribe(self):
        other = make_doctor(name='Dr. Other', email='other@example.com')
        with self.assertRaisesMessage(Forbidden, 'Unauthorized'):
            services.create_prescription(other.pk, self._data())
        self.assertFalse(Prescription.objects.exists())

    def test_medications_required(self):
        with self.assertRaisesMessage(ValidationError, 'Appointment ID, diagnosis, and medications are required'):
            services.create_prescription(self.doctor.pk, self._data(medications=[]))

    def test_incomplete_medication(self):
        with self.assertRaises(ValidationError):
            services.create_prescription(self.doctor.pk, self._data(medications=[{'name': 'Amoxicillin'}]))

    def test_update_replaces_medications(self):
        prescription = services.create_prescription(self.doctor.pk, self._data())
        services.update_prescription(prescription, self.doctor.pk, {
            'diagnosis': 'Pharyngitis',
            'medications': MEDICATIONS[:1],
            'status': 'completed',
        })
        prescription.refresh_from_db()

        self.assertEqual(prescription.diagnosis, 'Pharyngitis')
        self.assertEqual(prescription.status, 'completed')
        self.assertEqual(list(prescription.medications.values_list('name', flat=True)), ['Amoxicillin'])

    def test_only_author_updates(self):
        prescription = services.create_prescription(self.doctor.pk, self._data())
        other = make_doctor(name='Dr. Other', email='other@example.com')
        with self.assertRaises(Forbidden):
            services.update_prescription(prescription, other.pk, {'diagnosis': 'Changed'})


class PrescriptionApiTestCase(TestCase):
    """Prescription endpoints"""

    def setUp(self):
        self.client = JSONClient()
        self.patient = make_patient()
        self.doctor = make_doctor()
        self.appointment = make_appointment(self.patient, self.doctor)
        self.url = '/api/prescriptions/'

    def _create(self):
        return self.client.post_json(self.url, {
            'appointment_id': self.appointment.pk,
            'diagnosis': 'Tonsillitis',
            'medications': MEDICATIONS,
        }, **doctor_headers(self.doctor))

    def test_create(self):
        response, data = self._create()
        self.assertEqual(data['message'], 'Prescription created successfully')
        self.assertEqual(len(data['prescription']['medications']), 2)

    def test_other_doctor_is_rejected(self):
        other = make_doctor(name='Dr. Other', email='other@example.com')
        response, data = self.client.post_json(self.url, {
            'appointment_id': self.appointment.pk,
            'diagnosis': 'Tonsillitis',
            'medications': MEDICATIONS,
        }, **doctor_headers(other))
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Unauthorized')

    def test_lists_by_role(self):
        prescription_id = self._create()[1]['prescription']['id']

        data = self.client.get_json(f'{self.url}doctor/', **doctor_headers(self.doctor))[1]
        self.assertEqual(len(data['prescriptions']), 1)

        data = self.client.get_json(f'{self.url}mine/', **patient_headers(self.patient))[1]
        self.assertEqual(data['prescriptions'][0]['id'], prescription_id)

        data = self.client.get_json(self.url, **admin_headers())[1]
        self.assertEqual(len(data['prescriptions']), 1)

        data = self.client.get_json(self.url, **patient_headers(self.patient))[1]
        self.assertFalse(data['success'])

    def test_retrieve_and_update(self):
        prescription_id = self._create()[1]['prescription']['id']

        data = self.client.get_json(f'{self.url}{prescription_id}/')[1]
        self.assertEqual(data['prescription']['diagnosis'], 'Tonsillitis')

        response, data = self.client.put_json(
            f'{self.url}{prescription_id}/', {'advice': 'Warm fluids'}, **doctor_headers(self.doctor)
        )
        self.assertEqual(data['message'], 'Prescription updated successfully')
        self.assertEqual(data['prescription']['advice'], 'Warm fluids')

    def test_unknown_prescription(self):
        data = self.client.get_json(f'{self.url}9999/')[1]
        self.assertEqual(data['message'], 'Prescription not found')
