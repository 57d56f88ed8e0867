from django.urls import path, include
from django.views.generic import RedirectView

# Custom HMS admin site
from common.admin_site import hms_admin_site

from drf_spectacular.views import (
    SpectacularAPIView,
    SpectacularRedocView,
    SpectacularSwaggerView
)

urlpatterns = [
    # Root redirect to the API docs
    path('', RedirectView.as_view(url='/api/docs/', permanent=False), name='index'),

    # Admin panel - Using custom HMS admin site
    path('admin/', hms_admin_site.urls),

    # API documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('api/redoc/', SpectacularRedocView.as_view(url_name='schema'), name='redoc'),

    # Role logins: /api/admin/login, /api/doctor/login, /api/user/login, /api/user/register
    path('api/', include('apps.auth.urls')),

    # Each app router registers its own prefix (api/patients/, api/admissions/, ...)
    path('api/', include('apps.patients.urls')),
    path('api/', include('apps.doctors.urls')),
    path('api/', include('apps.appointments.urls')),
    path('api/', include('apps.ipd.urls')),
    path('api/', include('apps.billing.urls')),
    path('api/', include('apps.inventory.urls')),
    path('api/', include('apps.staff.urls')),
    path('api/', include('apps.prescriptions.urls')),
    path('api/', include('apps.telemedicine.urls')),
    path('api/', include('apps.reports.urls')),
]
