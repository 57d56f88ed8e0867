# apps/ipd/tests.py

from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from unittest.mock import patch

from django.test import TestCase

from common.testing import (
    JSONClient, admin_headers, doctor_headers, make_doctor, make_patient, patient_headers
)

from .models import Admission, synthetic_rooms


def utc(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


class AdmissionChargesTestCase(TestCase):
    """Room charges derived from the daily rate and the length of stay"""

    def setUp(self):
        self.doctor = make_doctor()

    def _admission(self, **extra):
        fields = {
            'patient_name': 'Walk-in',
            'doctor': self.doctor,
            'department': 'General',
            'admission_reason': 'Fever',
            'initial_diagnosis': 'Fever',
            'daily_charges': Decimal('1000.00'),
            'admission_date': utc(2024, 1, 1),
        }
        fields.update(extra)
        with patch('django.utils.timezone.now', return_value=utc(2024, 1, 1)):
            return Admission.objects.create(**fields)

    def test_open_stay_charged_per_started_day(self):
        admission = self._admission()
        self.assertEqual(admission.calculate_total_charges(now=utc(2024, 1, 4)), Decimal('3000.00'))
        # A started day counts in full
        self.assertEqual(admission.calculate_total_charges(now=utc(2024, 1, 4, 0, 1)), Decimal('4000.00'))

    def test_charges_never_decrease_over_time(self):
        admission = self._admission()
        earlier = admission.calculate_total_charges(now=utc(2024, 1, 3, 12))
        later = admission.calculate_total_charges(now=utc(2024, 1, 9))
        self.assertLessEqual(earlier, later)

    def test_save_stores_recomputed_total(self):
        admission = self._admission()
        with patch('django.utils.timezone.now', return_value=utc(2024, 1, 4)):
            admission.save()
        admission.refresh_from_db()
        self.assertEqual(admission.total_charges, Decimal('3000.00'))

    def test_without_daily_rate_stored_total_is_kept(self):
        admission = self._admission(daily_charges=Decimal('0.00'), total_charges=Decimal('750.00'))
        with patch('django.utils.timezone.now', return_value=utc(2024, 1, 10)):
            admission.save()
        admission.refresh_from_db()
        self.assertEqual(admission.total_charges, Decimal('750.00'))

    def test_discharge_stops_the_clock(self):
        admission = self._admission()
        with patch('django.utils.timezone.now', return_value=utc(2024, 1, 3)):
            admission.discharge(discharge_summary='Recovered')
        admission.refresh_from_db()
        self.assertEqual(admission.status, 'discharged')
        self.assertEqual(admission.total_charges, Decimal('2000.00'))
        self.assertEqual(admission.calculate_total_charges(now=utc(2024, 2, 1)), Decimal('2000.00'))
        self.assertEqual(admission.discharge_details['discharge_summary'], 'Recovered')


class AdmissionIdTestCase(TestCase):
    """Generated admission codes"""

    def setUp(self):
        self.doctor = make_doctor()

    def test_format(self):
        admission = Admission.objects.create(
            doctor=self.doctor, department='General',
            admission_reason='Fever', initial_diagnosis='Fever'
        )
        self.assertRegex(admission.admission_id, r'^ADM\d{4}\d{2}\d{4}$')

    def test_generated_code_uses_local_year_and_month(self):
        code = Admission.generate_admission_id(now=utc(2024, 3, 15, 12))
        self.assertTrue(code.startswith('ADM202403'))
        self.assertEqual(len(code), 13)

    def test_code_cannot_be_changed(self):
        Admission.objects.create(
            doctor=self.doctor, department='General',
            admission_reason='Fever', initial_diagnosis='Fever'
        )
        admission = Admission.objects.get()
        admission.admission_id = 'ADM2024010000'
        with self.assertRaises(ValueError):
            admission.save()


class SyntheticRoomsTestCase(TestCase):

    def test_room_inventory_layout(self):
        rooms = synthetic_rooms()
        self.assertEqual(len(rooms), 100)
        self.assertEqual(rooms[0], {'room_number': 'R001', 'room_type': 'icu'})
        self.assertEqual(rooms[20]['room_type'], 'private')
        self.assertEqual(rooms[40]['room_type'], 'semi_private')
        self.assertEqual(rooms[80]['room_type'], 'general')
        self.assertEqual(rooms[-1]['room_number'], 'R100')


class AdmissionApiTestCase(TestCase):
    """Admission endpoints"""

    def setUp(self):
        self.client = JSONClient()
        self.doctor = make_doctor()
        self.patient = make_patient(phone='9876543210', gender='female', dob='01_01_1990')
        self.url = '/api/admissions/'

    def _admit(self, headers=None, **data):
        payload = {
            'patient_id': self.patient.pk,
            'admitting_doctor_id': self.doctor.pk,
            'room_charges': 1000,
            'diagnosis': 'Dengue fever',
        }
        payload.update(data)
        return self.client.post_json(self.url, payload, **(headers or admin_headers()))

    def test_admit_patient_with_defaults(self):
        response, data = self._admit()

        self.assertEqual(response.status_code, 200)
        self.assertTrue(data['success'])
        self.assertEqual(data['message'], 'Patient admitted successfully')

        admission = Admission.objects.get(admission_id=data['admission_id'])
        self.assertEqual(admission.patient_name, self.patient.name)
        self.assertEqual(admission.patient_gender, 'female')
        self.assertEqual(admission.admission_type, 'emergency')
        self.assertEqual(admission.department, self.doctor.speciality)
        self.assertEqual(admission.bed_number, 'TBD')
        self.assertEqual(admission.room_type, 'general')
        self.assertEqual(admission.admission_reason, 'Dengue fever')
        self.assertEqual(admission.initial_diagnosis, 'Dengue fever')
        self.assertEqual(admission.doctor_name_at_admission, self.doctor.name)
        self.assertEqual(admission.attending_physicians[0]['role'], 'Primary')
        self.assertEqual(admission.daily_charges, Decimal('1000.00'))

    def test_doctor_admits_under_own_id(self):
        response, data = self.client.post_json(
            self.url,
            {'patient_id': self.patient.pk, 'diagnosis': 'Observation'},
            **doctor_headers(self.doctor)
        )
        self.assertTrue(data['success'])
        self.assertEqual(Admission.objects.get().doctor, self.doctor)

    def test_missing_doctor_is_rejected(self):
        response, data = self.client.post_json(self.url, {'patient_id': self.patient.pk}, **admin_headers())
        self.assertEqual(response.status_code, 200)
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Doctor ID is required')

    def test_unknown_patient_is_not_found(self):
        response, data = self._admit(patient_id=9999)
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Patient not found')
        self.assertEqual(data['code'], 'not_found')

    def test_charges_on_read_after_three_days(self):
        with patch('django.utils.timezone.now', return_value=utc(2024, 1, 1)):
            response, data = self._admit(admission_date='2024-01-01T00:00:00+00:00')
        admission_id = data['admission_id']

        with patch('django.utils.timezone.now', return_value=utc(2024, 1, 4)):
            response, data = self.client.get_json(f'{self.url}{admission_id}/', **admin_headers())

        self.assertTrue(data['success'])
        self.assertEqual(Decimal(data['admission']['total_charges']), Decimal('3000'))

    def test_get_by_record_id_or_code(self):
        response, data = self._admit()
        admission = Admission.objects.get(admission_id=data['admission_id'])

        by_code = self.client.get_json(f'{self.url}{admission.admission_id}/', **admin_headers())[1]
        by_pk = self.client.get_json(f'{self.url}{admission.pk}/', **admin_headers())[1]
        self.assertEqual(by_code['admission']['id'], by_pk['admission']['id'])

        missing = self.client.get_json(f'{self.url}ADM2099010000/', **admin_headers())[1]
        self.assertFalse(missing['success'])
        self.assertEqual(missing['message'], 'Admission not found')

    def test_clinical_records_are_appended(self):
        admission_id = self._admit()[1]['admission_id']

        response, data = self.client.post_json(
            f'{self.url}{admission_id}/vitals/',
            {'temperature': 99.1, 'heart_rate': 80, 'blood_pressure': {'systolic': 120, 'diastolic': 80}},
            **doctor_headers(self.doctor)
        )
        self.assertEqual(data['message'], 'Vitals recorded successfully')

        response, data = self.client.post_json(
            f'{self.url}{admission_id}/lab-test/',
            {'test_name': 'CBC', 'test_date': '2024-01-02'},
            **doctor_headers(self.doctor)
        )
        self.assertEqual(data['message'], 'Lab test added successfully')

        response, data = self.client.post_json(
            f'{self.url}{admission_id}/medication/', {'medication_name': 'Paracetamol'}, **admin_headers()
        )
        self.assertFalse(data['success'])

        admission = Admission.objects.get(admission_id=admission_id)
        self.assertEqual(len(admission.vitals), 1)
        self.assertEqual(admission.vitals[0]['blood_pressure']['systolic'], 120.0)
        self.assertEqual(admission.lab_tests[0]['status'], 'ordered')
        self.assertEqual(admission.medications, [])

    def test_discharge(self):
        admission_id = self._admit()[1]['admission_id']
        response, data = self.client.post_json(
            f'{self.url}{admission_id}/discharge/',
            {'discharge_summary': 'Stable', 'final_diagnosis': 'Dengue fever'},
            **admin_headers()
        )
        self.assertEqual(data['message'], 'Patient discharged successfully')

        admission = Admission.objects.get(admission_id=admission_id)
        self.assertEqual(admission.status, 'discharged')
        self.assertIsNotNone(admission.actual_discharge_date)
        self.assertEqual(admission.discharge_details['discharge_type'], 'regular')

    def test_update_merges_room_details(self):
        admission_id = self._admit()[1]['admission_id']
        response, data = self.client.put_json(
            f'{self.url}{admission_id}/',
            {'room_details': {'room_number': 'R005', 'room_type': 'icu'}, 'treatment_plan': 'IV fluids'},
            **admin_headers()
        )
        self.assertTrue(data['success'])
        admission = Admission.objects.get(admission_id=admission_id)
        self.assertEqual(admission.room_number, 'R005')
        self.assertEqual(admission.room_type, 'icu')
        self.assertEqual(admission.treatment_plan, 'IV fluids')

    def test_available_rooms_excludes_occupied(self):
        self._admit(room_number='R001')
        response, data = self.client.get_json(f'{self.url}available-rooms/', **admin_headers())

        self.assertEqual(data['total_rooms'], 100)
        self.assertEqual(data['occupied_rooms'], 1)
        self.assertEqual(data['available_rooms'], 99)
        self.assertNotIn('R001', [room['room_number'] for room in data['rooms']])

    def test_doctor_admissions_include_attending(self):
        other = make_doctor(name='Dr. Nisha Rao', email='nisha@example.com')
        admission_id = self._admit(admitting_doctor_id=other.pk)[1]['admission_id']
        admission = Admission.objects.get(admission_id=admission_id)
        admission.attending_physicians.append({'doctor_id': self.doctor.pk, 'role': 'Consultant'})
        admission.save()

        response, data = self.client.get_json(
            f'{self.url}doctor/{self.doctor.pk}/', **doctor_headers(self.doctor)
        )
        self.assertEqual(len(data['admissions']), 1)
        self.assertEqual(data['admissions'][0]['doctor_role'], 'Consultant')

        response, data = self.client.get_json(f'{self.url}doctor/{other.pk}/', **doctor_headers(self.doctor))
        self.assertFalse(data['success'])

    def test_patient_sees_own_admissions_with_costs(self):
        self._admit()
        response, data = self.client.get_json(f'{self.url}my-admissions/', **patient_headers(self.patient))

        self.assertTrue(data['success'])
        self.assertEqual(len(data['admissions']), 1)
        self.assertIn('estimated_daily_cost', data['admissions'][0])
        self.assertIn('total_cost', data['admissions'][0])

    def test_delete_is_admin_only(self):
        admission_id = self._admit()[1]['admission_id']

        response, data = self.client.delete_json(f'{self.url}{admission_id}/', **doctor_headers(self.doctor))
        self.assertFalse(data['success'])
        self.assertEqual(data['code'], 'forbidden')

        response, data = self.client.delete_json(f'{self.url}{admission_id}/', **admin_headers())
        self.assertEqual(data['message'], 'Admission deleted successfully')
        self.assertFalse(Admission.objects.exists())

    def test_missing_token_gets_envelope(self):
        response, data = self.client.get_json(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Not Authorized Login Again')

    def test_list_filters(self):
        self._admit()
        self._admit(status='under_treatment')

        data = self.client.get_json(self.url, {'status': 'under_treatment'}, **admin_headers())[1]
        self.assertEqual(len(data['admissions']), 1)

        data = self.client.get_json(self.url, {'status': 'All'}, **admin_headers())[1]
        self.assertEqual(len(data['admissions']), 2)

    def test_list_date_range_and_department(self):
        self._admit()
        self._admit(department='Cardiology')
        Admission.objects.filter(department='Cardiology').update(
            admission_date=datetime(2024, 1, 10, 6, tzinfo=dt_timezone.utc)
        )

        data = self.client.get_json(
            self.url, {'start_date': '2024-01-01', 'end_date': '2024-01-31'}, **admin_headers()
        )[1]
        self.assertEqual([row['department'] for row in data['admissions']], ['Cardiology'])

        # A lone start date leaves the range open
        data = self.client.get_json(self.url, {'start_date': '2024-01-01'}, **admin_headers())[1]
        self.assertEqual(len(data['admissions']), 2)

        data = self.client.get_json(self.url, {'department': 'Cardiology'}, **admin_headers())[1]
        self.assertEqual(len(data['admissions']), 1)
        data = self.client.get_json(self.url, {'department': 'All'}, **admin_headers())[1]
        self.assertEqual(len(data['admissions']), 2)

    def test_list_rejects_impossible_date(self):
        self._admit()
        data = self.client.get_json(
            self.url, {'start_date': '2024-13-45', 'end_date': '2024-01-31'}, **admin_headers()
        )[1]
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Invalid date for start_date')
