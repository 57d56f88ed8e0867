"""
Fixtures shared by the app test suites.

``auth_headers`` returns the Django test-client kwargs that carry a role
token the way the SPAs send it.
"""
import json
from decimal import Decimal

from django.test import Client

from .auth_backends import ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT, issue_token

ROLE_HEADERS = {
    ROLE_ADMIN: 'HTTP_ATOKEN',
    ROLE_DOCTOR: 'HTTP_DTOKEN',
    ROLE_PATIENT: 'HTTP_TOKEN',
}


def auth_headers(role, user_id=None):
    return {ROLE_HEADERS[role]: issue_token(role, user_id)}


def admin_headers():
    return auth_headers(ROLE_ADMIN)


def doctor_headers(doctor):
    return auth_headers(ROLE_DOCTOR, doctor.pk)


def patient_headers(patient):
    return auth_headers(ROLE_PATIENT, patient.pk)


def make_patient(name='Asha Verma', email='asha@example.com', password='patient-pass', **extra):
    from apps.patients.models import PatientProfile

    patient = PatientProfile(name=name, email=email, **extra)
    patient.set_password(password)
    patient.save()
    return patient


def make_doctor(name='Dr. Rahul Mehta', email='rahul@example.com', password='doctor-pass', **extra):
    from apps.doctors.models import Doctor

    fields = {
        'speciality': 'General physician',
        'degree': 'MBBS',
        'experience': '4 Years',
        'about': 'General medicine',
        'fees': Decimal('500.00'),
        'address': {'line1': '17th Cross', 'line2': 'Richmond'},
    }
    fields.update(extra)
    doctor = Doctor(name=name, email=email, **fields)
    doctor.set_password(password)
    doctor.save()
    return doctor


def make_appointment(patient, doctor, slot_date='20_1_2024', slot_time='10:30 AM', **extra):
    from apps.appointments.models import Appointment

    return Appointment.objects.create(
        patient=patient,
        doctor=doctor,
        slot_date=slot_date,
        slot_time=slot_time,
        patient_data={'name': patient.name},
        doctor_data={'name': doctor.name},
        amount=doctor.fees,
        **extra
    )


class JSONClient(Client):
    """Test client that sends JSON bodies and decodes JSON responses."""

    def post_json(self, path, data=None, **extra):
        response = self.post(path, json.dumps(data or {}), content_type='application/json', **extra)
        return response, json.loads(response.content)

    def put_json(self, path, data=None, **extra):
        response = self.put(path, json.dumps(data or {}), content_type='application/json', **extra)
        return response, json.loads(response.content)

    def get_json(self, path, data=None, **extra):
        response = self.get(path, data, **extra)
        return response, json.loads(response.content)

    def delete_json(self, path, **extra):
        response = self.delete(path, **extra)
        return response, json.loads(response.content)
