"""
Django admin registrations for the A Casa models.
"""

from django.contrib import admin

from .models import (
    AuditEvent,
    Candidate,
    CandidateActivity,
    Contact,
    Employee,
    Guest,
    Lead,
    LeadActivity,
    MedicalRecord,
    ScheduleSubstitution,
    SobreavisoEmployee,
    Unit,
    User,
    UserPermission,
    WhatsAppMessage,
    WorkSchedule,
)


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'role', 'position', 'unit', 'type', 'is_active')
    list_filter = ('role', 'unit', 'type')
    search_fields = ('username', 'first_name', 'last_name', 'email', 'position')


@admin.register(UserPermission)
class UserPermissionAdmin(admin.ModelAdmin):
    list_display = ('user', 'updated_at', 'updated_by')
    search_fields = ('user__username',)


@admin.register(Guest)
class GuestAdmin(admin.ModelAdmin):
    list_display = ('id', 'full_name', 'unit', 'status', 'dependency_level', 'admission_date')
    list_filter = ('status', 'unit', 'dependency_level')
    search_fields = ('full_name', 'cpf')


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'guest', 'specialty', 'record_date', 'shift', 'professional_name', 'is_locked')
    list_filter = ('specialty', 'shift', 'is_locked')
    search_fields = ('guest__full_name', 'professional_name')


@admin.register(Unit)
class UnitAdmin(admin.ModelAdmin):
    list_display = ('id', 'name')


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    list_display = ('id', 'full_name', 'phone', 'unit', 'lgpd_consent')
    search_fields = ('full_name', 'phone', 'email')


@admin.register(Lead)
class LeadAdmin(admin.ModelAdmin):
    list_display = ('id', 'elderly_name', 'contact', 'stage', 'source', 'owner', 'updated_at')
    list_filter = ('stage', 'source')
    search_fields = ('elderly_name', 'contact__full_name', 'contact__phone')


@admin.register(LeadActivity)
class LeadActivityAdmin(admin.ModelAdmin):
    list_display = ('id', 'lead', 'type', 'title', 'done', 'due_at')
    list_filter = ('type', 'done')


@admin.register(WhatsAppMessage)
class WhatsAppMessageAdmin(admin.ModelAdmin):
    list_display = ('id', 'lead', 'direction', 'wa_from', 'wa_to', 'created_at')
    list_filter = ('direction',)


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ('id', 'full_name', 'position', 'unit', 'status', 'employment_type')
    list_filter = ('status', 'unit', 'employment_type')
    search_fields = ('full_name', 'cpf', 'license_number')


@admin.register(WorkSchedule)
class WorkScheduleAdmin(admin.ModelAdmin):
    list_display = ('id', 'employee', 'schedule_type', 'unit', 'month', 'year')
    list_filter = ('schedule_type', 'unit', 'year')


@admin.register(ScheduleSubstitution)
class ScheduleSubstitutionAdmin(admin.ModelAdmin):
    list_display = ('id', 'employee', 'substitute_name', 'day', 'month', 'year')
    list_filter = ('schedule_type', 'unit')


@admin.register(SobreavisoEmployee)
class SobreavisoEmployeeAdmin(admin.ModelAdmin):
    list_display = ('id', 'full_name', 'position', 'unit', 'status')
    list_filter = ('unit', 'status')
    search_fields = ('full_name', 'phone')


@admin.register(Candidate)
class CandidateAdmin(admin.ModelAdmin):
    list_display = ('id', 'full_name', 'desired_position', 'status', 'source', 'created_at')
    list_filter = ('status', 'source')
    search_fields = ('full_name', 'email', 'phone', 'desired_position')


@admin.register(CandidateActivity)
class CandidateActivityAdmin(admin.ModelAdmin):
    list_display = ('id', 'candidate', 'type', 'title', 'status')
    list_filter = ('type', 'status')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'action', 'object_type', 'object_id', 'created_at')
    list_filter = ('action',)
    search_fields = ('user__username', 'object_id')
