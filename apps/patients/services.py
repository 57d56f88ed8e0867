from common.exceptions import NotFound

from .models import PatientProfile


def get_patient_or_404(patient_id):
    try:
        return PatientProfile.objects.get(pk=patient_id)
    except (PatientProfile.DoesNotExist, ValueError, TypeError):
        raise NotFound('Patient not found')
