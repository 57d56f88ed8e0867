from django.contrib import admin

from common.admin_site import HMSModelAdmin, hms_admin_site

from .models import Staff, StaffAttendance


class StaffAttendanceInline(admin.TabularInline):
    model = StaffAttendance
    extra = 0
    readonly_fields = ['hours_worked']


@admin.register(Staff, site=hms_admin_site)
class StaffAdmin(HMSModelAdmin):
    list_display = ['employee_id', 'name', 'role', 'department', 'phone', 'status', 'date_of_joining']
    list_filter = ['role', 'department', 'status']
    search_fields = ['employee_id', 'name', 'email', 'phone']
    inlines = [StaffAttendanceInline]
    derived_fields = ['employee_id', 'created_at', 'updated_at']

    fieldsets = (
        ('Employee', {
            'fields': ('employee_id', 'name', 'email', 'phone', 'image')
        }),
        ('Employment', {
            'fields': ('role', 'department', 'date_of_joining', 'qualification', 'experience', 'salary', 'status')
        }),
        ('Contact & Schedule', {
            'fields': ('address', 'emergency_contact', 'shifts', 'leave_balance'),
            'classes': ('collapse',)
        }),
        ('System Fields', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )
