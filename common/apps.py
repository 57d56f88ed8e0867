from django.apps import AppConfig


class CommonConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'common'
    verbose_name = 'MediCare HMS'

    def ready(self):
        """Install the HMS admin site before the domain apps register their models."""
        from django.contrib import admin
        from .admin_site import hms_admin_site

        admin.site = hms_admin_site
        admin.sites.site = hms_admin_site
