import django_filters

from common.filters import AllOrExactFilter

from .models import Staff


class StaffFilter(django_filters.FilterSet):
    role = AllOrExactFilter()
    department = AllOrExactFilter()
    status = AllOrExactFilter()

    class Meta:
        model = Staff
        fields = ['role', 'department', 'status']
