from django.contrib import admin
from django.contrib.admin.sites import AdminSite
from django.utils.translation import gettext_lazy as _


class HMSAdminSite(AdminSite):
    """
    Back-office admin site for hospital staff
    """
    site_title = _('MediCare HMS Administration')
    site_header = _('MediCare HMS Admin')
    index_title = _('Welcome to Hospital Management System')


class HMSModelAdmin(admin.ModelAdmin):
    """
    Base ModelAdmin for HMS records.

    Generated codes and derived fields are always read-only; subclasses list
    them in ``derived_fields``.
    """

    derived_fields = ()
    list_per_page = 50

    def get_readonly_fields(self, request, obj=None):
        readonly = list(super().get_readonly_fields(request, obj))
        for field in self.derived_fields:
            if field not in readonly:
                readonly.append(field)
        return readonly


# Create custom admin site instance
hms_admin_site = HMSAdminSite(name='hms_admin')
