"""Prescription writing and lookups."""
import logging

from django.db import transaction

from common.exceptions import Forbidden, NotFound, ValidationError
from common.utils import parse_json_field

from .models import PrescribedMedication, Prescription

logger = logging.getLogger(__name__)

MEDICATION_FIELDS = ('name', 'dosage', 'frequency', 'duration')


def get_prescription(prescription_id):
    try:
        return Prescription.objects.prefetch_related('medications').get(pk=prescription_id)
    except (Prescription.DoesNotExist, ValueError, TypeError):
        raise NotFound('Prescription not found')


def _medications(value):
    medications = parse_json_field(value, 'medications', default=[])
    if not isinstance(medications, list) or not medications:
        raise ValidationError('Appointment ID, diagnosis, and medications are required')
    for medication in medications:
        if not isinstance(medication, dict) or any(not medication.get(key) for key in MEDICATION_FIELDS):
            raise ValidationError('Each medication needs name, dosage, frequency and duration')
    return medications


def _replace_medications(prescription, medications):
    prescription.medications.all().delete()
    PrescribedMedication.objects.bulk_create([
        PrescribedMedication(
            prescription=prescription,
            name=medication['name'],
            dosage=medication['dosage'],
            frequency=medication['frequency'],
            duration=medication['duration'],
            instructions=medication.get('instructions') or '',
        )
        for medication in medications
    ])


@transaction.atomic
def create_prescription(doctor_id, data):
    """
    Write a prescription for one of the doctor's appointments.

    The appointment is marked completed if it was not already.
    """
    from apps.appointments.services import get_appointment

    appointment_id = data.get('appointment_id')
    if not appointment_id or not data.get('diagnosis'):
        raise ValidationError('Appointment ID, diagnosis, and medications are required')
    medications = _medications(data.get('medications'))

    appointment = get_appointment(appointment_id)
    if appointment.doctor_id != doctor_id:
        logger.warning(f"Doctor {doctor_id} tried to prescribe for appointment {appointment.pk}")
        raise Forbidden('Unauthorized')
    if Prescription.objects.filter(appointment=appointment).exists():
        raise ValidationError('Prescription already exists for this appointment')

    patient = appointment.patient
    doctor = appointment.doctor
    prescription = Prescription.objects.create(
        appointment=appointment,
        doctor=doctor,
        patient=patient,
        patient_data={
            'name': patient.name,
            'email': patient.email,
            'phone': patient.phone,
            'age': patient.age if patient.age is not None else 'N/A',
            'gender': patient.gender,
        },
        doctor_data={
            'name': doctor.name,
            'speciality': doctor.speciality,
            'degree': doctor.degree,
        },
        appointment_data={
            'slot_date': appointment.slot_date,
            'slot_time': appointment.slot_time,
        },
        diagnosis=data['diagnosis'],
        symptoms=data.get('symptoms') or '',
        lab_tests=parse_json_field(data.get('lab_tests'), 'lab_tests', default=[]),
        advice=data.get('advice') or '',
        notes=data.get('notes') or '',
        follow_up_date=data.get('follow_up_date') or '',
    )
    _replace_medications(prescription, medications)

    if not appointment.is_completed:
        appointment.is_completed = True
        appointment.save(update_fields=['is_completed'])

    logger.info(f"Prescription {prescription.pk} written by doctor {doctor_id} for appointment {appointment.pk}")
    return prescription


@transaction.atomic
def update_prescription(prescription, doctor_id, data):
    if prescription.doctor_id != doctor_id:
        raise Forbidden('Unauthorized')

    changed = []
    for field in ('diagnosis', 'symptoms', 'advice', 'notes', 'follow_up_date', 'status'):
        if field in data:
            setattr(prescription, field, data[field] or '')
            changed.append(field)
    if 'lab_tests' in data:
        prescription.lab_tests = parse_json_field(data['lab_tests'], 'lab_tests', default=[])
        changed.append('lab_tests')
    if prescription.status not in dict(Prescription.STATUS_CHOICES):
        raise ValidationError(f"Invalid status: {prescription.status}")
    prescription.save()

    if 'medications' in data:
        _replace_medications(prescription, _medications(data['medications']))
        changed.append('medications')

    logger.info(f"Prescription {prescription.pk} updated: {changed}")
    return prescription
