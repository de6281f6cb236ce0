"""
URL mappings for the A Casa API.

Trailing slashes are omitted throughout (``APPEND_SLASH = False``).
"""
from django.urls import path, include

from .auth_views import login_view, jwt_refresh_view, jwt_logout_view
from .views import (
    crm, employees, guests, health, modules, prontuario, schedules, sobreaviso, talent_bank, users,
)
from .views.dashboard import dashboard


urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),

    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout'),

    # Module catalogue and the caller's own access
    path('api/modules', modules.module_catalogue, name='modules'),
    path('api/modules/validate', modules.module_validate, name='modules_validate'),
    path('api/modules/auto-fix', modules.module_auto_fix, name='modules_auto_fix'),
    path('api/modules/presets', modules.module_presets, name='modules_presets'),
    path('api/me/modules', modules.my_modules, name='my_modules'),
    path('api/me/navigation', modules.my_navigation, name='my_navigation'),

    # User management
    path('api/users', users.users_list, name='users'),
    path('api/users/<int:pk>', users.user_detail, name='user_detail'),
    path('api/users/<int:pk>/modules', users.user_modules, name='user_modules'),
    path('api/users/<int:pk>/modules/add', users.user_module_add, name='user_module_add'),
    path('api/users/<int:pk>/modules/remove', users.user_module_remove, name='user_module_remove'),
    path('api/users/<int:pk>/modules/validate', users.user_modules_validate, name='user_modules_validate'),

    # Guests and medical records
    path('api/guests', guests.guests_list, name='guests'),
    path('api/guests/<int:pk>', guests.guest_detail, name='guest_detail'),
    path('api/guests/<int:guest_id>/records', prontuario.guest_records, name='guest_records'),
    path('api/guests/<int:guest_id>/records/summary', prontuario.guest_records_summary,
         name='guest_records_summary'),
    path('api/records/<int:pk>', prontuario.record_detail, name='record_detail'),
    path('api/records/<int:pk>/sign', prontuario.record_sign, name='record_sign'),
    path('api/prontuario/permissions', prontuario.my_record_permissions, name='record_permissions'),

    # Staff roster, schedules and on-call list
    path('api/employees', employees.employees_list, name='employees'),
    path('api/employees/expiring', employees.employees_expiring, name='employees_expiring'),
    path('api/employees/<int:pk>', employees.employee_detail, name='employee_detail'),
    path('api/schedules', schedules.schedule_month, name='schedules'),
    path('api/schedules/employees', schedules.roster_employees, name='schedule_employees'),
    path('api/schedules/day', schedules.schedule_day, name='schedule_day'),
    path('api/schedules/substitutions', schedules.substitutions, name='schedule_substitutions'),
    path('api/schedules/report', schedules.schedule_report, name='schedule_report'),
    path('api/sobreaviso', sobreaviso.sobreaviso_list, name='sobreaviso'),
    path('api/sobreaviso/<int:pk>', sobreaviso.sobreaviso_detail, name='sobreaviso_detail'),

    # CRM
    path('api/crm/units', crm.units_list, name='crm_units'),
    path('api/crm/leads', crm.leads_list, name='crm_leads'),
    path('api/crm/leads/<int:pk>', crm.lead_detail, name='crm_lead_detail'),
    path('api/crm/leads/<int:pk>/move', crm.lead_move, name='crm_lead_move'),
    path('api/crm/leads/<int:pk>/activities', crm.lead_activities, name='crm_lead_activities'),
    path('api/crm/leads/<int:pk>/messages', crm.lead_messages, name='crm_lead_messages'),
    path('api/crm/activities/<int:pk>/toggle', crm.activity_toggle, name='crm_activity_toggle'),
    path('api/crm/pipeline', crm.pipeline_board, name='crm_pipeline'),
    path('api/crm/reports', crm.crm_reports, name='crm_reports'),
    path('api/crm/whatsapp/webhook', crm.whatsapp_webhook, name='whatsapp_webhook'),

    # Talent bank
    path('api/public/candidates', talent_bank.public_candidate_register, name='public_candidates'),
    path('api/talent-bank/candidates', talent_bank.candidates_list, name='candidates'),
    path('api/talent-bank/candidates/<int:pk>', talent_bank.candidate_detail, name='candidate_detail'),
    path('api/talent-bank/candidates/<int:pk>/move', talent_bank.candidate_move, name='candidate_move'),
    path('api/talent-bank/candidates/<int:pk>/activities', talent_bank.candidate_activities,
         name='candidate_activities'),
    path('api/talent-bank/activities/<int:pk>/complete', talent_bank.activity_complete,
         name='candidate_activity_complete'),
    path('api/talent-bank/pipeline', talent_bank.talent_board, name='talent_pipeline'),
    path('api/talent-bank/stats', talent_bank.talent_stats, name='talent_stats'),

    # Dashboard
    path('api/dashboard', dashboard, name='dashboard'),
]
