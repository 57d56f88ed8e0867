"""Doctor lookups shared by the doctor views and the telemedicine services."""
from common.exceptions import NotFound

from .models import Doctor


def get_doctor_or_404(doctor_id):
    try:
        return Doctor.objects.get(pk=doctor_id)
    except (Doctor.DoesNotExist, ValueError, TypeError):
        raise NotFound('Doctor not found')
