from common.filters import AllOrExactFilter, DateRangeFilterSet

from .models import Admission


class AdmissionFilter(DateRangeFilterSet):
    date_field = 'admission_date'

    status = AllOrExactFilter()
    department = AllOrExactFilter()

    class Meta:
        model = Admission
        fields = ['status', 'department', 'admission_type', 'room_type', 'start_date', 'end_date']
