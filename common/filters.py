"""
django-filter building blocks for the list endpoints.

The admin SPA sends ``All`` for an unselected dropdown and always sends the
date range as a ``start_date`` / ``end_date`` pair.
"""
import django_filters

from .utils import parse_datetime_param


class AllOrExactFilter(django_filters.CharFilter):
    """Exact match; the value ``All`` disables the filter."""

    def filter(self, qs, value):
        if value == 'All':
            return qs
        return super().filter(qs, value)


class DateRangeFilterSet(django_filters.FilterSet):
    """
    Inclusive ``start_date`` .. ``end_date`` range on ``date_field``.

    The range only applies when both ends are given; either end may be a
    plain date (local midnight) or an ISO datetime.
    """

    date_field = None

    start_date = django_filters.CharFilter(method='filter_date_range')
    end_date = django_filters.CharFilter(method='filter_date_range')

    def filter_date_range(self, queryset, name, value):
        if name != 'start_date':
            return queryset
        end_value = self.form.cleaned_data.get('end_date')
        if not end_value:
            return queryset

        start = parse_datetime_param(value, 'start_date')
        end = parse_datetime_param(end_value, 'end_date')
        return queryset.filter(**{
            f'{self.date_field}__gte': start,
            f'{self.date_field}__lte': end,
        })
