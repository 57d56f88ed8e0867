"""
Admission lifecycle: intake, clinical record appends, discharge, room lookup.

Clinical logs are read-modify-write appends on the admission row with no
locking; two concurrent appends to the same admission can lose one entry.
"""
import logging
from datetime import timedelta

from django.db.models import Q
from django.utils import timezone

from common.auth_backends import ROLE_DOCTOR
from common.exceptions import NotFound, ValidationError
from common.utils import (
    parse_datetime_param, parse_json_field, to_decimal, to_int
)

from .models import Admission, synthetic_rooms

logger = logging.getLogger(__name__)

ADMISSION_GENDERS = ('male', 'female', 'other')


def get_admission(identifier):
    """Look an admission up by storage pk or by its admission code."""
    lookup = Q(admission_id=str(identifier))
    if str(identifier).isdigit():
        lookup |= Q(pk=int(identifier))
    admission = (
        Admission.objects.select_related('patient', 'doctor')
        .filter(lookup)
        .first()
    )
    if admission is None:
        raise NotFound('Admission not found')
    return admission


def _choice(value, choices, field_name, default):
    if value in (None, ''):
        return default
    key = str(value).strip().lower().replace('-', '_').replace(' ', '_')
    valid = {choice for choice, _ in choices}
    if key not in valid:
        raise ValidationError(f"Invalid {field_name}: {value}")
    return key


def _emergency_contact(value):
    contact = parse_json_field(value, 'emergency_contact', default={}) or {}
    return {
        'name': contact.get('name', ''),
        'relationship': contact.get('relation') or contact.get('relationship', ''),
        'phone': contact.get('phone', ''),
        'address': contact.get('address', ''),
    }


def create_admission(data, principal=None):
    """
    Admit a patient under a doctor.

    The doctor comes from ``admitting_doctor_id`` / ``attending_doctor_id``,
    or the calling doctor when neither is sent. ``patient_id`` is optional;
    walk-ins send ``patient_name`` / ``patient_age`` / ``patient_gender``.
    """
    from apps.doctors.models import Doctor
    from apps.patients.models import PatientProfile

    doctor_id = data.get('admitting_doctor_id') or data.get('attending_doctor_id')
    if not doctor_id and principal is not None and principal.role == ROLE_DOCTOR:
        doctor_id = principal.id
    if not doctor_id:
        raise ValidationError('Doctor ID is required')

    patient = None
    patient_id = data.get('patient_id')
    if patient_id:
        try:
            patient = PatientProfile.objects.get(pk=patient_id)
        except (PatientProfile.DoesNotExist, ValueError, TypeError):
            raise NotFound('Patient not found')

    try:
        doctor = Doctor.objects.get(pk=doctor_id)
    except (Doctor.DoesNotExist, ValueError, TypeError):
        raise NotFound('Doctor not found')

    age = to_int(data.get('patient_age'), 'patient_age', default=0)
    if not age and patient is not None:
        age = patient.age or 0

    gender = data.get('patient_gender') or (patient.gender if patient else None)
    gender = str(gender).lower() if gender else 'not_specified'
    if gender not in ADMISSION_GENDERS:
        gender = 'not_specified'

    admission_date = parse_datetime_param(data.get('admission_date'), 'admission_date') or timezone.now()
    stay = to_int(data.get('expected_stay_duration'), 'expected_stay_duration')
    expected_discharge = None
    if stay and stay > 0:
        expected_discharge = admission_date + timedelta(days=stay)

    bed_number = data.get('bed_number') or 'TBD'
    diagnosis = data.get('diagnosis')

    admission = Admission(
        patient=patient,
        patient_name=data.get('patient_name') or (patient.name if patient else ''),
        patient_age=age,
        patient_gender=gender,
        patient_phone=data.get('patient_contact') or (patient.phone if patient else ''),
        admission_type=_choice(
            data.get('admission_type'), Admission.ADMISSION_TYPE_CHOICES, 'admission type', 'emergency'
        ),
        doctor=doctor,
        doctor_name_at_admission=doctor.name,
        department=data.get('department') or doctor.speciality,
        room_number=data.get('room_number') or bed_number,
        room_type=_choice(data.get('room_type'), Admission.ROOM_TYPE_CHOICES, 'room type', 'general'),
        bed_number=bed_number,
        daily_charges=to_decimal(data.get('room_charges'), 'room_charges', default=0),
        admission_date=admission_date,
        expected_discharge_date=expected_discharge,
        expected_stay_duration=stay if stay and stay > 0 else None,
        admission_reason=data.get('admission_reason') or diagnosis or 'Not specified',
        initial_diagnosis=diagnosis or 'To be determined',
        treatment_plan=data.get('symptoms') or 'To be determined',
        emergency_contact=_emergency_contact(data.get('emergency_contact')),
        insurance=parse_json_field(data.get('insurance_details'), 'insurance_details', default=None)
        or {'has_insurance': False},
        status=_choice(data.get('status'), Admission.STATUS_CHOICES, 'status', 'admitted'),
        attending_physicians=[{
            'doctor_id': doctor.pk,
            'doctor_name': doctor.name,
            'role': 'Primary',
            'assigned_date': timezone.now().isoformat(),
        }],
    )
    admission.save()

    logger.info(
        f"Admission {admission.admission_id} created: doctor {doctor.pk}, "
        f"patient {patient.pk if patient else 'walk-in'}, room {admission.room_number}"
    )
    return admission


# Fields merged as-is by update_admission; sub-records may arrive as JSON strings
UPDATABLE_FIELDS = [
    'patient_name', 'patient_age', 'patient_gender', 'patient_phone',
    'admission_type', 'department', 'room_number', 'room_type', 'bed_number',
    'daily_charges', 'expected_discharge_date', 'expected_stay_duration',
    'admission_reason', 'initial_diagnosis', 'final_diagnosis', 'treatment_plan',
    'status',
]
JSON_FIELDS = ['emergency_contact', 'insurance', 'discharge_details', 'attending_physicians']


def update_admission(admission, data):
    """Merge a partial update into the admission; charges are recomputed on save."""
    from .serializers import AdmissionUpdateSerializer

    payload = {key: data[key] for key in UPDATABLE_FIELDS if key in data}

    room_details = parse_json_field(data.get('room_details'), 'room_details', default={})
    for key in ('room_number', 'room_type', 'bed_number', 'daily_charges'):
        if key in room_details:
            payload[key] = room_details[key]

    for key in JSON_FIELDS:
        if key in data:
            payload[key] = parse_json_field(data[key], key, default={})

    serializer = AdmissionUpdateSerializer(admission, data=payload, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()

    logger.info(f"Admission {admission.admission_id} updated: {sorted(payload)}")
    return admission


def _required(data, fields):
    for field in fields:
        if data.get(field) in (None, ''):
            raise ValidationError(f"{field} is required")


def _iso(value, field_name):
    parsed = parse_datetime_param(value, field_name)
    return parsed.isoformat() if parsed else None


def _number(value, field_name):
    amount = to_decimal(value, field_name)
    return float(amount) if amount is not None else None


def build_vitals_entry(data):
    blood_pressure = parse_json_field(data.get('blood_pressure'), 'blood_pressure', default={}) or {}
    return {
        'recorded_date': timezone.now().isoformat(),
        'temperature': _number(data.get('temperature'), 'temperature'),
        'blood_pressure': {
            'systolic': _number(blood_pressure.get('systolic'), 'systolic'),
            'diastolic': _number(blood_pressure.get('diastolic'), 'diastolic'),
        },
        'heart_rate': _number(data.get('heart_rate'), 'heart_rate'),
        'respiratory_rate': _number(data.get('respiratory_rate'), 'respiratory_rate'),
        'oxygen_saturation': _number(data.get('oxygen_saturation'), 'oxygen_saturation'),
        'recorded_by': data.get('recorded_by', ''),
    }


def build_medication_entry(data):
    _required(data, ['medication_name', 'dosage', 'frequency', 'start_date'])
    return {
        'medication_name': data['medication_name'],
        'dosage': data['dosage'],
        'frequency': data['frequency'],
        'start_date': _iso(data['start_date'], 'start_date'),
        'end_date': _iso(data.get('end_date'), 'end_date'),
        'prescribed_by': data.get('prescribed_by', ''),
        'notes': data.get('notes', ''),
    }


def build_procedure_entry(data):
    _required(data, ['procedure_name', 'procedure_date', 'performed_by'])
    return {
        'procedure_name': data['procedure_name'],
        'procedure_date': _iso(data['procedure_date'], 'procedure_date'),
        'performed_by': data['performed_by'],
        'assistants': parse_json_field(data.get('assistants'), 'assistants', default=[]),
        'notes': data.get('notes', ''),
        'charges': _number(data.get('charges'), 'charges'),
    }


def build_lab_test_entry(data):
    _required(data, ['test_name', 'test_date'])
    return {
        'test_name': data['test_name'],
        'test_date': _iso(data['test_date'], 'test_date'),
        'results': data.get('results', ''),
        'normal_range': data.get('normal_range', ''),
        'status': _choice(data.get('status'), Admission.LAB_TEST_STATUS_CHOICES, 'lab test status', 'ordered'),
    }


def build_note_entry(data):
    _required(data, ['note'])
    return {
        'note': data['note'],
        'added_by': data.get('added_by', ''),
        'added_at': timezone.now().isoformat(),
    }


# record kind -> (model field, entry builder, success message)
CLINICAL_RECORDS = {
    'vitals': ('vitals', build_vitals_entry, 'Vitals recorded successfully'),
    'medication': ('medications', build_medication_entry, 'Medication added successfully'),
    'procedure': ('procedures', build_procedure_entry, 'Procedure added successfully'),
    'lab_test': ('lab_tests', build_lab_test_entry, 'Lab test added successfully'),
    'note': ('notes', build_note_entry, 'Note added successfully'),
}


def append_clinical_record(admission, kind, data):
    """Append one entry to a clinical log and return the success message."""
    field, build_entry, message = CLINICAL_RECORDS[kind]
    entry = build_entry(data)

    getattr(admission, field).append(entry)
    admission.save(update_fields=[field, 'updated_at'])

    logger.info(f"Admission {admission.admission_id}: {kind} appended")
    return message


def discharge_admission(admission, data):
    """Discharge the patient. No bill is created here; billing is a separate call."""
    follow_up_date = parse_datetime_param(data.get('follow_up_date'), 'follow_up_date')
    admission.discharge(
        discharge_type=_choice(
            data.get('discharge_type'), Admission.DISCHARGE_TYPE_CHOICES, 'discharge type', 'regular'
        ),
        discharge_summary=data.get('discharge_summary', ''),
        follow_up_instructions=data.get('follow_up_instructions', ''),
        follow_up_date=follow_up_date,
        discharged_by=data.get('discharged_by', ''),
        final_diagnosis=data.get('final_diagnosis', ''),
        final_bill_amount=to_decimal(data.get('final_bill_amount'), 'final_bill_amount'),
    )
    logger.info(f"Admission {admission.admission_id} discharged, charges {admission.total_charges}")
    return admission


def doctor_admissions(doctor_id):
    """Admissions where the doctor is the admitting or an attending physician."""
    admissions = []
    for admission in Admission.objects.select_related('patient', 'doctor').order_by('-admission_date'):
        role = admission.attending_role_for(doctor_id)
        if role:
            admission.doctor_role = role
            admissions.append(admission)
    return admissions


def occupied_room_numbers():
    return set(
        Admission.objects.exclude(status='discharged')
        .exclude(room_number='')
        .values_list('room_number', flat=True)
    )


def available_rooms():
    """Free rooms of the fixed room inventory with occupancy counts."""
    occupied = occupied_room_numbers()
    rooms = synthetic_rooms()
    free = [dict(room, is_occupied=False) for room in rooms if room['room_number'] not in occupied]
    return {
        'rooms': free,
        'total_rooms': len(rooms),
        'occupied_rooms': len(rooms) - len(free),
        'available_rooms': len(free),
    }
