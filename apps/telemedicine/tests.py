# apps/telemedicine/tests.py

from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from common.auth_backends import ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT, HMSUser
from common.exceptions import Forbidden, ValidationError
from common.testing import (
    JSONClient, admin_headers, doctor_headers, make_appointment, make_doctor, make_patient, patient_headers
)

from . import services
from .models import TelemedicineSession

SCHEDULED = '2024-02-01T10:00:00+05:30'


class SessionFeeTestCase(TestCase):

    def setUp(self):
        self.patient = make_patient()
        self.doctor = make_doctor()

    def _request(self, session_type=None):
        data = {'doctor_id': self.doctor.pk, 'scheduled_time': SCHEDULED}
        if session_type:
            data['session_type'] = session_type
        session = services.create_direct_session(self.patient.pk, data)
        session.refresh_from_db()
        return session

    def test_house_defaults(self):
        self.assertEqual(self._request().session_fee, Decimal('50.00'))
        self.assertEqual(self._request('emergency').session_fee, Decimal('150.00'))
        self.assertEqual(self._request('follow_up').session_fee, Decimal('30.00'))

    def test_doctor_configured_fee(self):
        self.doctor.emergency_fee = Decimal('400.00')
        self.doctor.save()
        self.assertEqual(self._request('emergency').session_fee, Decimal('400.00'))
        self.assertEqual(self._request('video').session_fee, Decimal('50.00'))

    def test_request_starts_pending(self):
        session = self._request()
        self.assertEqual(session.status, 'pending')
        self.assertEqual(session.session_type, 'consultation')
        self.assertRegex(session.room_id, r'^room_\d+_[a-z0-9]{9}$')
        self.assertIsNone(session.appointment)

    def test_invalid_session_type(self):
        with self.assertRaises(ValidationError):
            self._request('hologram')


class SessionLifecycleTestCase(TestCase):
    """pending -> scheduled -> ongoing -> completed"""

    def setUp(self):
        self.patient = make_patient()
        self.doctor = make_doctor()
        self.patient_user = HMSUser(ROLE_PATIENT, self.patient.pk)
        self.doctor_user = HMSUser(ROLE_DOCTOR, self.doctor.pk)
        self.session = services.create_direct_session(
            self.patient.pk, {'doctor_id': self.doctor.pk, 'scheduled_time': SCHEDULED}
        )

    def test_join_requires_approval(self):
        with self.assertRaisesMessage(ValidationError, 'Session is not available for joining'):
            services.join_session(self.session, self.patient_user)

        services.approve_session(self.session, self.doctor_user)
        services.join_session(self.session, self.patient_user)
        self.session.refresh_from_db()

        self.assertEqual(self.session.status, 'ongoing')
        self.assertIsNotNone(self.session.start_time)

    def test_rejected_session_cannot_be_reviewed_again(self):
        services.reject_session(self.session, HMSUser(ROLE_ADMIN))
        self.assertEqual(self.session.status, 'rejected')

        with self.assertRaisesMessage(ValidationError, 'Only pending sessions can be reviewed'):
            services.approve_session(self.session, HMSUser(ROLE_ADMIN))

    def test_other_doctor_cannot_review_or_join(self):
        other = make_doctor(name='Dr. Other', email='other@example.com')
        other_user = HMSUser(ROLE_DOCTOR, other.pk)

        with self.assertRaisesMessage(Forbidden, 'Unauthorized action'):
            services.approve_session(self.session, other_user)

        services.approve_session(self.session, self.doctor_user)
        with self.assertRaises(Forbidden):
            services.join_session(self.session, other_user)

    def test_end_and_rate(self):
        services.approve_session(self.session, self.doctor_user)
        services.join_session(self.session, self.doctor_user)

        with self.assertRaisesMessage(ValidationError, 'Only completed sessions can be rated'):
            services.rate_session(self.session, self.patient.pk, 5)

        services.end_session(self.session, self.doctor.pk, {
            'doctor_notes': 'Improving',
            'follow_up_required': 'true',
            'follow_up_date': '2024-02-15',
        })
        self.session.refresh_from_db()
        self.assertEqual(self.session.status, 'completed')
        self.assertTrue(self.session.follow_up_required)
        self.assertEqual(timezone.localtime(self.session.follow_up_date).date().isoformat(), '2024-02-15')

        with self.assertRaisesMessage(ValidationError, 'Rating must be between 1 and 5'):
            services.rate_session(self.session, self.patient.pk, 6)

        services.rate_session(self.session, self.patient.pk, 4, feedback='Helpful')
        self.session.refresh_from_db()
        self.assertEqual(self.session.patient_rating, 4)
        self.assertEqual(self.session.feedback, 'Helpful')

    def test_only_session_doctor_ends(self):
        other = make_doctor(name='Dr. Other', email='other@example.com')
        with self.assertRaises(Forbidden):
            services.end_session(self.session, other.pk, {})

    def test_chat_sender_defaults_to_role(self):
        services.add_chat_message(self.session, self.patient_user, {'message': 'Hello doctor'})
        services.add_chat_message(self.session, self.doctor_user, {'message': 'Hello', 'message_type': 'text'})
        self.session.refresh_from_db()

        self.assertEqual([entry['sender'] for entry in self.session.chat_history], ['patient', 'doctor'])
        self.assertEqual(self.session.chat_history[0]['message'], 'Hello doctor')

    def test_chat_validation(self):
        with self.assertRaisesMessage(ValidationError, 'Message is required'):
            services.add_chat_message(self.session, self.patient_user, {})
        with self.assertRaises(ValidationError):
            services.add_chat_message(self.session, self.patient_user, {'message': 'x', 'message_type': 'video'})

    def test_pending_sessions_for_doctor(self):
        other = make_doctor(name='Dr. Other', email='other@example.com')
        services.create_direct_session(self.patient.pk, {'doctor_id': other.pk, 'scheduled_time': SCHEDULED})

        self.assertEqual(services.pending_sessions(self.doctor_user).count(), 1)
        self.assertEqual(services.pending_sessions(HMSUser(ROLE_ADMIN)).count(), 2)


class TelemedicineApiTestCase(TestCase):
    """Telemedicine endpoints"""

    def setUp(self):
        self.client = JSONClient()
        self.patient = make_patient()
        self.doctor = make_doctor()
        self.url = '/api/telemedicine/'

    def test_admin_creates_from_appointment(self):
        appointment = make_appointment(self.patient, self.doctor)
        response, data = self.client.post_json(self.url, {
            'appointment_id': appointment.pk,
            'session_type': 'video',
            'scheduled_time': SCHEDULED,
        }, **admin_headers())

        self.assertEqual(data['message'], 'Telemedicine session created')
        self.assertEqual(data['session']['appointment'], appointment.pk)
        appointment.refresh_from_db()
        self.assertTrue(appointment.is_telemedicine)

    def test_patient_request_to_rating(self):
        response, data = self.client.post_json(f'{self.url}create-session/', {
            'doctor_id': self.doctor.pk,
            'scheduled_time': SCHEDULED,
        }, **patient_headers(self.patient))
        session_pk = data['session']['id']
        self.assertEqual(data['session']['status'], 'pending')
        self.assertEqual(data['session']['doctor_name'], self.doctor.name)

        data = self.client.get_json(f'{self.url}pending-sessions/', **doctor_headers(self.doctor))[1]
        self.assertEqual(len(data['sessions']), 1)

        data = self.client.post_json(f'{self.url}{session_pk}/approve/', {}, **doctor_headers(self.doctor))[1]
        self.assertEqual(data['message'], 'Session approved successfully')

        data = self.client.post_json(f'{self.url}{session_pk}/join/', {}, **patient_headers(self.patient))[1]
        self.assertEqual(data['message'], 'Joined session successfully')
        self.assertTrue(data['room_id'].startswith('room_'))

        data = self.client.post_json(
            f'{self.url}{session_pk}/add-message/', {'message': 'Can you hear me?'}, **patient_headers(self.patient)
        )[1]
        self.assertEqual(data['message'], 'Message added successfully')

        data = self.client.post_json(
            f'{self.url}{session_pk}/end/', {'prescription_notes': 'Rest'}, **doctor_headers(self.doctor)
        )[1]
        self.assertEqual(data['message'], 'Session ended successfully')

        data = self.client.post_json(
            f'{self.url}{session_pk}/rate/', {'rating': 5}, **patient_headers(self.patient)
        )[1]
        self.assertEqual(data['message'], 'Session rated successfully')

        data = self.client.get_json(f'{self.url}patient-sessions/', **patient_headers(self.patient))[1]
        self.assertEqual(data['sessions'][0]['patient_rating'], 5)
        self.assertEqual(len(data['sessions'][0]['chat_history']), 1)

        data = self.client.get_json(f'{self.url}doctor-sessions/', **doctor_headers(self.doctor))[1]
        self.assertEqual(data['sessions'][0]['status'], 'completed')

    def test_retrieve_checks_participant(self):
        session = services.create_direct_session(
            self.patient.pk, {'doctor_id': self.doctor.pk, 'scheduled_time': SCHEDULED}
        )
        other = make_patient(name='Other', email='other@example.com')

        data = self.client.get_json(f'{self.url}{session.pk}/', **patient_headers(other))[1]
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Unauthorized action')

        data = self.client.get_json(f'{self.url}{session.pk}/', **patient_headers(self.patient))[1]
        self.assertEqual(data['session']['id'], session.pk)

    def test_admin_cancel(self):
        session = services.create_direct_session(
            self.patient.pk, {'doctor_id': self.doctor.pk, 'scheduled_time': SCHEDULED}
        )
        data = self.client.post_json(f'{self.url}{session.pk}/cancel/', {}, **admin_headers())[1]
        self.assertEqual(data['message'], 'Session cancelled successfully')
        self.assertEqual(TelemedicineSession.objects.get(pk=session.pk).status, 'cancelled')

        data = self.client.post_json(f'{self.url}{session.pk}/cancel/', {}, **patient_headers(self.patient))[1]
        self.assertFalse(data['success'])

    def test_unknown_session(self):
        data = self.client.get_json(f'{self.url}9999/', **admin_headers())[1]
        self.assertEqual(data['message'], 'Session not found')

    def test_request_with_unknown_doctor(self):
        data = self.client.post_json(f'{self.url}create-session/', {
            'doctor_id': 9999,
            'scheduled_time': SCHEDULED,
        }, **patient_headers(self.patient))[1]
        self.assertFalse(data['success'])
        self.assertEqual(data['message'], 'Doctor not found')
        self.assertFalse(TelemedicineSession.objects.exists())
