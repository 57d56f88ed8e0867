# common/tests.py

from io import StringIO

import jwt
from django.conf import settings
from django.core.management import call_command
from django.test import TestCase, override_settings

from apps.patients.models import PatientProfile
from common.auth_backends import ROLE_ADMIN, ROLE_DOCTOR, decode_token, issue_token
from common.exceptions import ValidationError
from common.testing import JSONClient, make_doctor, make_patient
from common.utils import parse_datetime_param


class RoleTokenTestCase(TestCase):
    """Issuing and verifying role tokens"""

    def test_doctor_token_round_trip(self):
        principal = decode_token(issue_token(ROLE_DOCTOR, 7))
        self.assertEqual(principal.role, ROLE_DOCTOR)
        self.assertEqual(principal.id, 7)

    def test_unknown_role_is_rejected(self):
        token = jwt.encode({'role': 'nurse', 'id': 1}, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
        with self.assertRaises(jwt.InvalidTokenError):
            decode_token(token)

    def test_admin_token_is_bound_to_credentials(self):
        token = issue_token(ROLE_ADMIN)
        self.assertEqual(decode_token(token).role, ROLE_ADMIN)

        with override_settings(ADMIN_PASSWORD='rotated-password'):
            with self.assertRaises(jwt.InvalidTokenError):
                decode_token(token)


class AuthApiTestCase(TestCase):
    """Login, registration and the error envelope"""

    def setUp(self):
        self.client = JSONClient()

    def test_admin_login(self):
        response, data = self.client.post_json('/api/admin/login', {
            'email': settings.ADMIN_EMAIL,
            'password': settings.ADMIN_PASSWORD,
        })
        self.assertTrue(data['success'])

        response, data = self.client.get_json('/api/me', HTTP_ATOKEN=data['token'])
        self.assertEqual(data['role'], 'admin')

    def test_admin_login_wrong_password(self):
        response, data = self.client.post_json('/api/admin/login', {
            'email': settings.ADMIN_EMAIL,
            'password': 'wrong',
        })
        self.assertEqual(response.status_code, 200)
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Invalid credentials')

    def test_doctor_login_and_bearer_header(self):
        doctor = make_doctor()
        response, data = self.client.post_json('/api/doctor/login', {
            'email': doctor.email,
            'password': 'doctor-pass',
        })

        response, data = self.client.get_json('/api/me', HTTP_AUTHORIZATION=f"Bearer {data['token']}")
        self.assertEqual(data['role'], 'doctor')
        self.assertEqual(data['id'], doctor.pk)

    def test_user_login(self):
        patient = make_patient()

        data = self.client.post_json('/api/user/login', {'email': 'nobody@example.com', 'password': 'x'})[1]
        self.assertEqual(data['message'], 'User does not exist')

        data = self.client.post_json('/api/user/login', {'email': patient.email, 'password': 'wrong'})[1]
        self.assertEqual(data['message'], 'Invalid credentials')

        data = self.client.post_json('/api/user/login', {'email': patient.email, 'password': 'patient-pass'})[1]
        self.assertTrue(data['success'])
        self.assertEqual(decode_token(data['token']).id, patient.pk)

    def test_register(self):
        url = '/api/user/register'
        cases = [
            ({'name': 'Asha', 'email': 'asha@example.com'}, 'Missing Details'),
            ({'name': 'Asha', 'email': 'not-an-email', 'password': 'long-enough'}, 'Please enter a valid email'),
            ({'name': 'Asha', 'email': 'asha@example.com', 'password': 'short'}, 'Please enter a strong password'),
        ]
        for payload, message in cases:
            data = self.client.post_json(url, payload)[1]
            self.assertEqual(data['message'], message)

        data = self.client.post_json(url, {'name': 'Asha', 'email': 'asha@example.com', 'password': 'long-enough'})[1]
        self.assertTrue(data['success'])
        self.assertTrue(PatientProfile.objects.get(email='asha@example.com').check_password('long-enough'))

        data = self.client.post_json(url, {'name': 'Asha', 'email': 'asha@example.com', 'password': 'long-enough'})[1]
        self.assertEqual(data['message'], 'User already exists')

    def test_missing_token(self):
        response, data = self.client.get_json('/api/me')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(data, {'success': False, 'message': 'Not Authorized Login Again', 'code': 'unauthorized'})

    def test_tampered_token(self):
        response, data = self.client.get_json('/api/me', HTTP_TOKEN='not-a-token')
        self.assertFalse(data['success'])
        self.assertEqual(data['code'], 'unauthorized')

    @override_settings(HMS_ERROR_STATUS_CODES=True)
    def test_real_status_codes(self):
        response, data = self.client.get_json('/api/me')
        self.assertEqual(response.status_code, 401)
        self.assertFalse(data['success'])


class ParseDatetimeParamTestCase(TestCase):

    def test_plain_date_is_local_midnight(self):
        parsed = parse_datetime_param('2024-03-05', 'start_date')
        self.assertEqual((parsed.year, parsed.month, parsed.day, parsed.hour), (2024, 3, 5, 0))
        self.assertEqual(str(parsed.tzinfo), settings.TIME_ZONE)

    def test_malformed_value(self):
        with self.assertRaisesMessage(ValidationError, 'Invalid date for start_date'):
            parse_datetime_param('next week', 'start_date')

    def test_impossible_date(self):
        with self.assertRaisesMessage(ValidationError, 'Invalid date for start_date'):
            parse_datetime_param('2024-13-45', 'start_date')
        with self.assertRaisesMessage(ValidationError, 'Invalid date for end_date'):
            parse_datetime_param('2024-02-30T25:00:00', 'end_date')


class MigrationsTestCase(TestCase):

    def test_models_match_migrations(self):
        output = StringIO()
        try:
            call_command('makemigrations', '--check', '--dry-run', stdout=output)
        except SystemExit:
            self.fail(f"Missing migrations:\n{output.getvalue()}")
