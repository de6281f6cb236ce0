"""
Database models for the A Casa backend.

These models capture the residents (guests) of the houses, their
multidisciplinary medical record, the staff roster with its monthly
schedules, the commercial CRM, the talent bank and the per-user module
permissions.  Field names mirror the camelCase keys of
the JSON payloads so the serializers map them one-to-one.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models

UNIT_CHOICES = [
    ('Botafogo', 'Botafogo'),
    ('Tijuca', 'Tijuca'),
]

DEPENDENCY_LEVEL_CHOICES = [
    ('I', 'Grau I'),
    ('II', 'Grau II'),
    ('III', 'Grau III'),
]


class User(AbstractUser):
    """Back-office account.

    ``role`` decides which modules an account may see at all; ``position``
    (cargo) decides which medical-record specialty it may write.
    """
    ROLE_CHOICES = [
        ('staff', 'Colaborador'),
        ('admin', 'Administrador'),
    ]
    TYPE_CHOICES = [
        ('matriz', 'Matriz'),
        ('franqueado', 'Franqueado'),
    ]
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default='staff', db_index=True)
    position = models.CharField(max_length=100, blank=True)
    unit = models.CharField(max_length=20, choices=UNIT_CHOICES, blank=True)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='matriz')
    cpf = models.CharField(max_length=14, blank=True)
    phone = models.CharField(max_length=32, blank=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class UserPermission(models.Model):
    """Enabled module ids for one user, stored verbatim as a JSON array."""
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='module_permission')
    enabled_modules = models.JSONField(default=list, blank=True)
    updated_at = models.DateTimeField(auto_now=True)
    updated_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+'
    )

    def __str__(self) -> str:
        return f"{self.user_id}: {len(self.enabled_modules or [])} modules"


class Guest(models.Model):
    """A resident (hóspede) of one of the houses."""
    STATUS_CHOICES = [
        ('Ativo', 'Ativo'),
        ('Inativo', 'Inativo'),
    ]
    EXIT_REASON_CHOICES = [
        ('Óbito', 'Óbito'),
        ('Rescisão', 'Rescisão'),
        ('Transferência', 'Transferência'),
        ('Outro', 'Outro'),
    ]
    GENDER_CHOICES = [
        ('Masculino', 'Masculino'),
        ('Feminino', 'Feminino'),
    ]

    full_name = models.CharField(max_length=255)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True)
    birth_date = models.DateField(null=True, blank=True)
    cpf = models.CharField(max_length=14, blank=True, db_index=True)
    rg = models.CharField(max_length=20, blank=True)
    has_curatorship = models.BooleanField(default=False)
    image_usage_authorized = models.BooleanField(default=False)

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='Ativo', db_index=True)
    admission_date = models.DateField(null=True, blank=True)
    exit_date = models.DateField(null=True, blank=True)
    exit_reason = models.CharField(max_length=20, choices=EXIT_REASON_CHOICES, blank=True)
    contract_expiry_date = models.DateField(null=True, blank=True)
    dependency_level = models.CharField(max_length=3, choices=DEPENDENCY_LEVEL_CHOICES, default='I')

    legal_responsible_relationship = models.CharField(max_length=100, blank=True)
    legal_responsible_cpf = models.CharField(max_length=14, blank=True)
    financial_responsible_name = models.CharField(max_length=255, blank=True)
    financial_responsible_phone = models.CharField(max_length=32, blank=True)
    financial_responsible_email = models.EmailField(blank=True)

    unit = models.CharField(max_length=20, choices=UNIT_CHOICES, db_index=True)
    room_number = models.CharField(max_length=20, blank=True)
    health_plan = models.CharField(max_length=100, blank=True)
    has_physiotherapy = models.BooleanField(default=False)
    has_speech_therapy = models.BooleanField(default=False)
    vaccination_up_to_date = models.BooleanField(default=False)
    vaccines = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.full_name} ({self.unit})"


class MedicalRecord(models.Model):
    """One multidisciplinary evolution written for a guest."""
    SPECIALTY_CHOICES = [
        ('Medicina', 'Medicina'),
        ('Enfermagem', 'Enfermagem'),
        ('Técnico de Enfermagem', 'Técnico de Enfermagem'),
        ('Fisioterapia', 'Fisioterapia'),
        ('Fonoaudiologia', 'Fonoaudiologia'),
        ('Psicologia', 'Psicologia'),
        ('Nutrição', 'Nutrição'),
        ('Serviço Social', 'Serviço Social'),
    ]
    SHIFT_CHOICES = [
        ('SD', 'Serviço Diurno'),
        ('SN', 'Serviço Noturno'),
    ]

    guest = models.ForeignKey(Guest, on_delete=models.CASCADE, related_name='medical_records')
    specialty = models.CharField(max_length=30, choices=SPECIALTY_CHOICES, db_index=True)
    record_date = models.DateField(db_index=True)
    shift = models.CharField(max_length=2, choices=SHIFT_CHOICES, default='SD')
    professional = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='medical_records'
    )
    professional_name = models.CharField(max_length=255, blank=True)
    professional_registry = models.CharField(max_length=50, blank=True)
    content = models.JSONField(default=dict, blank=True)
    is_locked = models.BooleanField(default=False)
    signature = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['guest', 'record_date'], name='core_medica_guest_i_0c7e2d_idx'),
        ]

    def __str__(self) -> str:
        return f"{self.specialty} {self.record_date} guest={self.guest_id}"


# ---------------------------------------------------------------------------
# CRM
# ---------------------------------------------------------------------------

class Unit(models.Model):
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return self.name


class Contact(models.Model):
    """Family member or responsible person who reached out."""
    unit = models.ForeignKey(Unit, null=True, blank=True, on_delete=models.SET_NULL, related_name='contacts')
    full_name = models.CharField(max_length=255, blank=True)
    relation = models.CharField(max_length=50, blank=True)
    phone = models.CharField(max_length=32, blank=True, db_index=True)
    email = models.EmailField(blank=True)
    neighborhood = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)
    lgpd_consent = models.BooleanField(default=False)
    lgpd_consent_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.full_name or self.phone


class Lead(models.Model):
    STAGES = [
        'Novo',
        'Qualificando',
        'Agendou visita',
        'Visitou',
        'Proposta',
        'Fechado',
        'Perdido',
    ]
    STAGE_CHOICES = [(s, s) for s in STAGES]
    CLOSED_STAGES = ('Fechado', 'Perdido')

    contact = models.ForeignKey(Contact, null=True, blank=True, on_delete=models.SET_NULL, related_name='leads')
    stage = models.CharField(max_length=20, choices=STAGE_CHOICES, default='Novo', db_index=True)
    source = models.CharField(max_length=50, blank=True)
    owner = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='owned_leads')
    diagnosis = models.CharField(max_length=255, blank=True)
    dependency_grade = models.CharField(max_length=3, choices=DEPENDENCY_LEVEL_CHOICES, default='I')
    elderly_name = models.CharField(max_length=255, blank=True)
    elderly_age = models.PositiveIntegerField(null=True, blank=True)
    value_band = models.CharField(max_length=50, blank=True)
    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Lead #{self.pk} ({self.stage})"


class LeadActivity(models.Model):
    TYPE_CHOICES = [
        ('call', 'Ligação'),
        ('visit', 'Visita'),
        ('msg', 'Mensagem'),
        ('task', 'Tarefa'),
    ]
    lead = models.ForeignKey(Lead, on_delete=models.CASCADE, related_name='activities')
    type = models.CharField(max_length=10, choices=TYPE_CHOICES, default='task')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    due_at = models.DateTimeField(null=True, blank=True)
    done = models.BooleanField(default=False)
    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.type}: {self.title}"


class WhatsAppMessage(models.Model):
    DIRECTION_CHOICES = [
        ('inbound', 'inbound'),
        ('outbound', 'outbound'),
    ]
    lead = models.ForeignKey(Lead, on_delete=models.CASCADE, related_name='messages')
    wa_from = models.CharField(max_length=32)
    wa_to = models.CharField(max_length=32)
    direction = models.CharField(max_length=10, choices=DIRECTION_CHOICES)
    body = models.TextField()
    wa_msg_id = models.CharField(max_length=128, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=['lead', 'created_at'], name='core_whatsa_lead_id_5b1f0a_idx')]

    def __str__(self) -> str:
        return f"{self.direction} lead={self.lead_id}"


# ---------------------------------------------------------------------------
# Talent bank
# ---------------------------------------------------------------------------

class Candidate(models.Model):
    STATUSES = [
        'Novo',
        'Triagem',
        'Entrevista Agendada',
        'Entrevistado',
        'Aprovado',
        'Contratado',
        'Rejeitado',
        'Inativo',
    ]
    STATUS_CHOICES = [(s, s) for s in STATUSES]
    SOURCES = [
        'Site/Formulário',
        'Indicação',
        'LinkedIn',
        'WhatsApp',
        'Email',
        'Presencial',
        'Outro',
    ]
    SOURCE_CHOICES = [(s, s) for s in SOURCES]

    full_name = models.CharField(max_length=255)
    email = models.EmailField()
    phone = models.CharField(max_length=32)
    desired_position = models.CharField(max_length=100, db_index=True)
    experience_years = models.PositiveIntegerField(default=0)
    curriculum_url = models.URLField(blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=2, default='RJ')
    availability = models.CharField(max_length=50, blank=True)
    salary_expectation = models.CharField(max_length=50, blank=True)
    status = models.CharField(max_length=30, choices=STATUS_CHOICES, default='Novo', db_index=True)
    source = models.CharField(max_length=30, choices=SOURCE_CHOICES, default='Outro')
    lgpd_consent = models.BooleanField(default=False)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.full_name} ({self.status})"


class CandidateActivity(models.Model):
    TYPE_CHOICES = [(t, t) for t in ('Ligação', 'Email', 'WhatsApp', 'Entrevista', 'Tarefa', 'Anotação')]
    STATUS_CHOICES = [(s, s) for s in ('Pendente', 'Em Andamento', 'Concluída', 'Cancelada')]

    candidate = models.ForeignKey(Candidate, on_delete=models.CASCADE, related_name='activities')
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='Anotação')
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    scheduled_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Pendente')
    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"{self.type}: {self.title}"


class Employee(models.Model):
    """A member of staff (colaborador) of one of the houses.

    Exams, vaccines and vacations are kept as JSON lists of dicts; their
    ``expiryDate`` entries feed the expiring-items report.
    """
    STATUS_CHOICES = [(s, s) for s in ('Ativo', 'Inativo', 'Afastado', 'Férias')]
    EMPLOYMENT_TYPE_CHOICES = [(s, s) for s in ('CLT', 'Contrato', 'Terceirizado', 'Estágio', 'Outro')]
    COUNCIL_CHOICES = [
        (s, s) for s in ('COREN', 'CRM', 'CRF', 'CRESS', 'CRN', 'CREFITO', 'CRA', 'Outro', 'Não Possui')
    ]

    full_name = models.CharField(max_length=255)
    cpf = models.CharField(max_length=14, blank=True, db_index=True)
    rg = models.CharField(max_length=20, blank=True)
    birth_date = models.DateField(null=True, blank=True)
    address = models.CharField(max_length=255, blank=True)
    position = models.CharField(max_length=100, db_index=True)
    unit = models.CharField(max_length=20, choices=UNIT_CHOICES, db_index=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='Ativo', db_index=True)
    photo = models.URLField(blank=True)
    observations = models.TextField(blank=True)
    receives_transportation = models.BooleanField(default=False)

    license_council = models.CharField(max_length=12, choices=COUNCIL_CHOICES, default='Não Possui')
    license_number = models.CharField(max_length=30, blank=True)
    license_expiry_date = models.DateField(null=True, blank=True)

    employment_type = models.CharField(max_length=15, choices=EMPLOYMENT_TYPE_CHOICES, default='CLT')
    exit_date = models.DateField(null=True, blank=True)
    exit_reason = models.CharField(max_length=100, blank=True)

    covid_vaccines = models.JSONField(default=list, blank=True)
    medical_exams = models.JSONField(default=list, blank=True)
    general_vaccines = models.JSONField(default=list, blank=True)
    vacations = models.JSONField(default=list, blank=True)
    # vínculo-specific data (CTPS/PIS for CLT, bank data for Contrato, company for Terceirizado)
    employment_data = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.full_name} ({self.position})"


SCHEDULE_TYPE_CHOICES = [(s, s) for s in ('Geral', 'Enfermagem', 'Nutrição')]
SHIFT_CHOICES = [(s, s) for s in ('SD', 'DR', '12', '24', '6h')]


class WorkSchedule(models.Model):
    """One employee's month on one schedule; ``days`` maps ``"1".."31"`` to a shift code."""
    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='schedules')
    schedule_type = models.CharField(max_length=12, choices=SCHEDULE_TYPE_CHOICES)
    unit = models.CharField(max_length=20, choices=UNIT_CHOICES)
    month = models.PositiveSmallIntegerField()
    year = models.PositiveSmallIntegerField()
    days = models.JSONField(default=dict, blank=True)
    created_by = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='+')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['employee', 'schedule_type', 'unit', 'month', 'year'], name='uniq_work_schedule_month',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.employee_id} {self.schedule_type}/{self.unit} {self.month:02d}/{self.year}"


class ScheduleSubstitution(models.Model):
    """A day on which someone else (a curinga) covered an employee's shift."""
    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='substitutions')
    schedule_type = models.CharField(max_length=12, choices=SCHEDULE_TYPE_CHOICES)
    unit = models.CharField(max_length=20, choices=UNIT_CHOICES)
    month = models.PositiveSmallIntegerField()
    year = models.PositiveSmallIntegerField()
    day = models.PositiveSmallIntegerField()
    substitute = models.ForeignKey(
        Employee, null=True, blank=True, on_delete=models.SET_NULL, related_name='covered_shifts'
    )
    substitute_name = models.CharField(max_length=255)
    reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['employee', 'schedule_type', 'unit', 'month', 'year', 'day'],
                name='uniq_schedule_substitution_day',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.substitute_name} for {self.employee_id} on {self.day:02d}/{self.month:02d}/{self.year}"


ON_CALL_UNIT_CHOICES = UNIT_CHOICES + [('Ambas', 'Ambas')]


class SobreavisoEmployee(models.Model):
    """On-call professional outside the regular roster."""
    STATUS_CHOICES = [('Ativo', 'Ativo'), ('Inativo', 'Inativo')]

    full_name = models.CharField(max_length=255)
    cpf = models.CharField(max_length=14, blank=True)
    position = models.CharField(max_length=100)
    phone = models.CharField(max_length=32)
    pix = models.CharField(max_length=100, blank=True)
    unit = models.CharField(max_length=20, choices=ON_CALL_UNIT_CHOICES)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='Ativo', db_index=True)
    observations = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.full_name} ({self.unit})"


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.IntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='core_audite_action_2f9c1e_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='core_audite_object__8d4b7a_idx'),
        ]
