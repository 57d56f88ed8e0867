import django_filters

from common.filters import AllOrExactFilter

from .models import InventoryItem


class InventoryItemFilter(django_filters.FilterSet):
    category = AllOrExactFilter()
    status = AllOrExactFilter()

    class Meta:
        model = InventoryItem
        fields = ['category', 'status', 'unit']
