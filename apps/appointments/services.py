"""
Appointment booking and state changes.

Slot bookkeeping lives on the doctor (``Doctor.slots_booked``); booking and
cancelling keep it in step with the appointment rows.
"""
import logging

from django.db import transaction

from common.auth_backends import ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT
from common.exceptions import Forbidden, NotFound, ValidationError

from .models import Appointment

logger = logging.getLogger(__name__)


def get_appointment(appointment_id):
    try:
        return Appointment.objects.select_related('patient', 'doctor').get(pk=appointment_id)
    except (Appointment.DoesNotExist, ValueError, TypeError):
        raise NotFound('Appointment not found')


def doctor_snapshot(doctor):
    return {
        'id': doctor.pk,
        'name': doctor.name,
        'email': doctor.email,
        'image': doctor.image,
        'speciality': doctor.speciality,
        'degree': doctor.degree,
        'experience': doctor.experience,
        'fees': str(doctor.fees),
        'address': doctor.address,
    }


def patient_snapshot(patient):
    return {
        'id': patient.pk,
        'name': patient.name,
        'email': patient.email,
        'image': patient.image,
        'phone': patient.phone,
        'gender': patient.gender,
        'dob': patient.dob,
        'address': patient.address,
    }


@transaction.atomic
def book_appointment(patient, doctor_id, slot_date, slot_time):
    from apps.doctors.models import Doctor

    try:
        doctor = Doctor.objects.select_for_update().get(pk=doctor_id)
    except (Doctor.DoesNotExist, ValueError, TypeError):
        raise NotFound('Doctor Not Found')

    if not doctor.available:
        raise ValidationError('Doctor Not Available')
    if not doctor.is_slot_free(slot_date, slot_time):
        raise ValidationError('Slot Not Available')

    appointment = Appointment.objects.create(
        patient=patient,
        doctor=doctor,
        slot_date=slot_date,
        slot_time=slot_time,
        patient_data=patient_snapshot(patient),
        doctor_data=doctor_snapshot(doctor),
        amount=doctor.fees,
    )
    doctor.book_slot(slot_date, slot_time)

    logger.info(f"Appointment {appointment.pk} booked: patient {patient.pk}, doctor {doctor.pk}, {slot_date} {slot_time}")
    return appointment


@transaction.atomic
def cancel_appointment(appointment, principal):
    """Cancel an appointment and release the doctor's slot."""
    if principal.role == ROLE_PATIENT and appointment.patient_id != principal.id:
        raise Forbidden('Unauthorized action')
    if principal.role == ROLE_DOCTOR and appointment.doctor_id != principal.id:
        raise Forbidden('Cancellation Failed')
    if principal.role not in (ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT):
        raise Forbidden('Unauthorized action')

    appointment.cancelled = True
    appointment.save(update_fields=['cancelled'])
    appointment.doctor.release_slot(appointment.slot_date, appointment.slot_time)

    logger.info(f"Appointment {appointment.pk} cancelled by {principal}")
    return appointment


def complete_appointment(appointment, doctor_id):
    if appointment.doctor_id != doctor_id:
        raise Forbidden('Mark Failed')
    appointment.is_completed = True
    appointment.save(update_fields=['is_completed'])
    logger.info(f"Appointment {appointment.pk} completed")
    return appointment


def pay_appointment(appointment, patient_id):
    if appointment.patient_id != patient_id:
        raise Forbidden('Unauthorized action')
    if appointment.cancelled:
        raise ValidationError('Appointment Cancelled or not found')
    appointment.payment = True
    appointment.save(update_fields=['payment'])
    logger.info(f"Appointment {appointment.pk} marked paid")
    return appointment
