"""
Telemedicine session lifecycle.

Sessions start ``pending``. An admin or the session's doctor approves
(-> ``scheduled``) or rejects them; only scheduled sessions can be joined.
"""
import logging

from django.db import transaction
from django.utils import timezone

from apps.doctors.services import get_doctor_or_404
from apps.patients.services import get_patient_or_404
from common.auth_backends import ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT
from common.exceptions import Forbidden, NotFound, ValidationError
from common.utils import parse_datetime_param, to_decimal, to_int

from .models import TelemedicineSession, session_fee_for

logger = logging.getLogger(__name__)


def get_session(session_pk):
    try:
        return TelemedicineSession.objects.select_related('patient', 'doctor', 'appointment').get(pk=session_pk)
    except (TelemedicineSession.DoesNotExist, ValueError, TypeError):
        raise NotFound('Session not found')


def _session_type(value):
    key = str(value or 'consultation').strip().lower().replace('-', '_')
    if key not in dict(TelemedicineSession.SESSION_TYPE_CHOICES):
        raise ValidationError(f"Invalid session type: {value}")
    return key


def _scheduled_time(value):
    scheduled = parse_datetime_param(value, 'scheduled_time')
    if scheduled is None:
        raise ValidationError('Scheduled time is required')
    return scheduled


def check_participant(session, principal):
    """Patients and doctors may only act on their own sessions."""
    if principal.role == ROLE_PATIENT and session.patient_id != principal.id:
        raise Forbidden('Unauthorized action')
    if principal.role == ROLE_DOCTOR and session.doctor_id != principal.id:
        raise Forbidden('Unauthorized action')


@transaction.atomic
def create_session_from_appointment(data):
    """Admin path: book a session for an existing appointment and flag it as telemedicine."""
    from apps.appointments.services import get_appointment

    appointment = get_appointment(data.get('appointment_id'))
    session_type = _session_type(data.get('session_type'))
    fee = to_decimal(data.get('session_fee'), 'session_fee')

    session = TelemedicineSession.objects.create(
        patient=appointment.patient,
        doctor=appointment.doctor,
        appointment=appointment,
        session_type=session_type,
        scheduled_time=_scheduled_time(data.get('scheduled_time')),
        duration=to_int(data.get('duration'), 'duration', default=30),
        session_fee=fee if fee is not None else session_fee_for(appointment.doctor, session_type),
    )
    appointment.is_telemedicine = True
    appointment.save(update_fields=['is_telemedicine'])

    logger.info(f"Telemedicine session {session.session_id} created for appointment {appointment.pk}")
    return session


def create_direct_session(patient_id, data):
    """Patient path: request a session with a doctor, priced from the doctor's fees."""
    patient = get_patient_or_404(patient_id)
    doctor = get_doctor_or_404(data.get('doctor_id'))
    session_type = _session_type(data.get('session_type'))

    session = TelemedicineSession.objects.create(
        patient=patient,
        doctor=doctor,
        session_type=session_type,
        scheduled_time=_scheduled_time(data.get('scheduled_time')),
        session_fee=session_fee_for(doctor, session_type),
    )
    logger.info(
        f"Telemedicine session {session.session_id} requested by patient {patient.pk} "
        f"with doctor {doctor.pk} ({session_type}, fee {session.session_fee})"
    )
    return session


def pending_sessions(principal):
    sessions = TelemedicineSession.objects.select_related('patient', 'doctor').filter(status='pending')
    if principal.role == ROLE_DOCTOR:
        sessions = sessions.filter(doctor_id=principal.id)
    return sessions.order_by('scheduled_time')


def _review(session, principal, new_status):
    if principal.role != ROLE_ADMIN:
        check_participant(session, principal)
    if session.status != 'pending':
        logger.warning(f"Session {session.session_id} is {session.status}, cannot move to {new_status}")
        raise ValidationError('Only pending sessions can be reviewed')
    session.status = new_status
    session.save(update_fields=['status', 'updated_at'])
    logger.info(f"Session {session.session_id} {new_status} by {principal}")
    return session


def approve_session(session, principal):
    return _review(session, principal, 'scheduled')


def reject_session(session, principal):
    return _review(session, principal, 'rejected')


def join_session(session, principal):
    check_participant(session, principal)
    if session.status != 'scheduled':
        raise ValidationError('Session is not available for joining')
    session.status = 'ongoing'
    session.start_time = timezone.now()
    session.save(update_fields=['status', 'start_time', 'updated_at'])
    logger.info(f"Session {session.session_id} joined by {principal}")
    return session


def end_session(session, doctor_id, data):
    if session.doctor_id != doctor_id:
        raise Forbidden('Unauthorized action')

    session.status = 'completed'
    session.end_time = timezone.now()
    session.prescription_notes = data.get('prescription_notes') or ''
    session.doctor_notes = data.get('doctor_notes') or ''
    session.follow_up_required = str(data.get('follow_up_required')).lower() in ('true', '1')
    if session.follow_up_required and data.get('follow_up_date'):
        session.follow_up_date = parse_datetime_param(data['follow_up_date'], 'follow_up_date')
    session.save()

    logger.info(f"Session {session.session_id} completed by doctor {doctor_id}")
    return session


def add_chat_message(session, principal, data):
    check_participant(session, principal)
    sender = data.get('sender') or ('patient' if principal.role == ROLE_PATIENT else principal.role)
    message = data.get('message')
    message_type = data.get('message_type') or 'text'
    if not message:
        raise ValidationError('Message is required')
    if sender not in TelemedicineSession.SENDER_CHOICES:
        raise ValidationError(f"Invalid sender: {sender}")
    if message_type not in TelemedicineSession.MESSAGE_TYPE_CHOICES:
        raise ValidationError(f"Invalid message type: {message_type}")
    session.add_message(sender, message, message_type)
    return session


def rate_session(session, patient_id, rating, feedback=None):
    if session.patient_id != patient_id:
        raise Forbidden('Unauthorized action')
    rating = to_int(rating, 'rating')
    if rating is None or rating < 1 or rating > 5:
        raise ValidationError('Rating must be between 1 and 5')
    if session.status != 'completed':
        raise ValidationError('Only completed sessions can be rated')

    session.patient_rating = rating
    if feedback:
        session.feedback = feedback
    session.save(update_fields=['patient_rating', 'feedback', 'updated_at'])
    logger.info(f"Session {session.session_id} rated {rating}")
    return session


def cancel_session(session):
    session.status = 'cancelled'
    session.save(update_fields=['status', 'updated_at'])
    logger.info(f"Session {session.session_id} cancelled")
    return session
