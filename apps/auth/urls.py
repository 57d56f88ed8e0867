"""
Role login endpoints, mounted at the API root:

    POST /api/admin/login
    POST /api/doctor/login
    POST /api/user/login
    POST /api/user/register
    GET  /api/me
"""

from django.urls import path

from apps.auth import views

urlpatterns = [
    path('admin/login', views.admin_login_view, name='admin-login'),
    path('doctor/login', views.doctor_login_view, name='doctor-login'),
    path('user/login', views.user_login_view, name='user-login'),
    path('user/register', views.user_register_view, name='user-register'),
    path('me', views.me_view, name='me'),
]
