import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


UNITS = [('Botafogo', 'Botafogo'), ('Tijuca', 'Tijuca')]
DEPENDENCY_LEVELS = [('I', 'Grau I'), ('II', 'Grau II'), ('III', 'Grau III')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('role', models.CharField(choices=[('staff', 'Colaborador'), ('admin', 'Administrador')], db_index=True, default='staff', max_length=10)),
                ('position', models.CharField(blank=True, max_length=100)),
                ('unit', models.CharField(blank=True, choices=UNITS, max_length=20)),
                ('type', models.CharField(choices=[('matriz', 'Matriz'), ('franqueado', 'Franqueado')], default='matriz', max_length=20)),
                ('cpf', models.CharField(blank=True, max_length=14)),
                ('phone', models.CharField(blank=True, max_length=32)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'abstract': False,
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='UserPermission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('enabled_modules', models.JSONField(blank=True, default=list)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='module_permission', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='Guest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('full_name', models.CharField(max_length=255)),
                ('gender', models.CharField(blank=True, choices=[('Masculino', 'Masculino'), ('Feminino', 'Feminino')], max_length=10)),
                ('birth_date', models.DateField(blank=True, null=True)),
                ('cpf', models.CharField(blank=True, db_index=True, max_length=14)),
                ('rg', models.CharField(blank=True, max_length=20)),
                ('has_curatorship', models.BooleanField(default=False)),
                ('image_usage_authorized', models.BooleanField(default=False)),
                ('status', models.CharField(choices=[('Ativo', 'Ativo'), ('Inativo', 'Inativo')], db_index=True, default='Ativo', max_length=10)),
                ('admission_date', models.DateField(blank=True, null=True)),
                ('exit_date', models.DateField(blank=True, null=True)),
                ('exit_reason', models.CharField(blank=True, choices=[('Óbito', 'Óbito'), ('Rescisão', 'Rescisão'), ('Transferência', 'Transferência'), ('Outro', 'Outro')], max_length=20)),
                ('contract_expiry_date', models.DateField(blank=True, null=True)),
                ('dependency_level', models.CharField(choices=DEPENDENCY_LEVELS, default='I', max_length=3)),
                ('legal_responsible_relationship', models.CharField(blank=True, max_length=100)),
                ('legal_responsible_cpf', models.CharField(blank=True, max_length=14)),
                ('financial_responsible_name', models.CharField(blank=True, max_length=255)),
                ('financial_responsible_phone', models.CharField(blank=True, max_length=32)),
                ('financial_responsible_email', models.EmailField(blank=True, max_length=254)),
                ('unit', models.CharField(choices=UNITS, db_index=True, max_length=20)),
                ('room_number', models.CharField(blank=True, max_length=20)),
                ('health_plan', models.CharField(blank=True, max_length=100)),
                ('has_physiotherapy', models.BooleanField(default=False)),
                ('has_speech_therapy', models.BooleanField(default=False)),
                ('vaccination_up_to_date', models.BooleanField(default=False)),
                ('vaccines', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name='MedicalRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('specialty', models.CharField(choices=[('Medicina', 'Medicina'), ('Enfermagem', 'Enfermagem'), ('Técnico de Enfermagem', 'Técnico de Enfermagem'), ('Fisioterapia', 'Fisioterapia'), ('Fonoaudiologia', 'Fonoaudiologia'), ('Psicologia', 'Psicologia'), ('Nutrição', 'Nutrição'), ('Serviço Social', 'Serviço Social')], db_index=True, max_length=30)),
                ('record_date', models.DateField(db_index=True)),
                ('shift', models.CharField(choices=[('SD', 'Serviço Diurno'), ('SN', 'Serviço Noturno')], default='SD', max_length=2)),
                ('professional_name', models.CharField(blank=True, max_length=255)),
                ('professional_registry', models.CharField(blank=True, max_length=50)),
                ('content', models.JSONField(blank=True, default=dict)),
                ('is_locked', models.BooleanField(default=False)),
                ('signature', models.JSONField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('guest', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='medical_records', to='core.guest')),
                ('professional', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='medical_records', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [models.Index(fields=['guest', 'record_date'], name='core_medica_guest_i_0c7e2d_idx')],
            },
        ),
        migrations.CreateModel(
            name='Unit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
        ),
        migrations.CreateModel(
            name='Contact',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('full_name', models.CharField(blank=True, max_length=255)),
                ('relation', models.CharField(blank=True, max_length=50)),
                ('phone', models.CharField(blank=True, db_index=True, max_length=32)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('neighborhood', models.CharField(blank=True, max_length=100)),
                ('notes', models.TextField(blank=True)),
                ('lgpd_consent', models.BooleanField(default=False)),
                ('lgpd_consent_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('unit', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='contacts', to='core.unit')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='Lead',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('stage', models.CharField(choices=[('Novo', 'Novo'), ('Qualificando', 'Qualificando'), ('Agendou visita', 'Agendou visita'), ('Visitou', 'Visitou'), ('Proposta', 'Proposta'), ('Fechado', 'Fechado'), ('Perdido', 'Perdido')], db_index=True, default='Novo', max_length=20)),
                ('source', models.CharField(blank=True, max_length=50)),
                ('diagnosis', models.CharField(blank=True, max_length=255)),
                ('dependency_grade', models.CharField(choices=DEPENDENCY_LEVELS, default='I', max_length=3)),
                ('elderly_name', models.CharField(blank=True, max_length=255)),
                ('elderly_age', models.PositiveIntegerField(blank=True, null=True)),
                ('value_band', models.CharField(blank=True, max_length=50)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('contact', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='leads', to='core.contact')),
                ('owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='owned_leads', to=settings.AUTH_USER_MODEL)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='LeadActivity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('call', 'Ligação'), ('visit', 'Visita'), ('msg', 'Mensagem'), ('task', 'Tarefa')], default='task', max_length=10)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('due_at', models.DateTimeField(blank=True, null=True)),
                ('done', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('lead', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='activities', to='core.lead')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='WhatsAppMessage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('wa_from', models.CharField(max_length=32)),
                ('wa_to', models.CharField(max_length=32)),
                ('direction', models.CharField(choices=[('inbound', 'inbound'), ('outbound', 'outbound')], max_length=10)),
                ('body', models.TextField()),
                ('wa_msg_id', models.CharField(blank=True, db_index=True, max_length=128)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('lead', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='messages', to='core.lead')),
            ],
            options={
                'indexes': [models.Index(fields=['lead', 'created_at'], name='core_whatsa_lead_id_5b1f0a_idx')],
            },
        ),
        migrations.CreateModel(
            name='Candidate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('full_name', models.CharField(max_length=255)),
                ('email', models.EmailField(max_length=254)),
                ('phone', models.CharField(max_length=32)),
                ('desired_position', models.CharField(db_index=True, max_length=100)),
                ('experience_years', models.PositiveIntegerField(default=0)),
                ('curriculum_url', models.URLField(blank=True)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('state', models.CharField(default='RJ', max_length=2)),
                ('availability', models.CharField(blank=True, max_length=50)),
                ('salary_expectation', models.CharField(blank=True, max_length=50)),
                ('status', models.CharField(choices=[('Novo', 'Novo'), ('Triagem', 'Triagem'), ('Entrevista Agendada', 'Entrevista Agendada'), ('Entrevistado', 'Entrevistado'), ('Aprovado', 'Aprovado'), ('Contratado', 'Contratado'), ('Rejeitado', 'Rejeitado'), ('Inativo', 'Inativo')], db_index=True, default='Novo', max_length=30)),
                ('source', models.CharField(choices=[('Site/Formulário', 'Site/Formulário'), ('Indicação', 'Indicação'), ('LinkedIn', 'LinkedIn'), ('WhatsApp', 'WhatsApp'), ('Email', 'Email'), ('Presencial', 'Presencial'), ('Outro', 'Outro')], default='Outro', max_length=30)),
                ('lgpd_consent', models.BooleanField(default=False)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='CandidateActivity',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('Ligação', 'Ligação'), ('Email', 'Email'), ('WhatsApp', 'WhatsApp'), ('Entrevista', 'Entrevista'), ('Tarefa', 'Tarefa'), ('Anotação', 'Anotação')], default='Anotação', max_length=20)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField(blank=True)),
                ('scheduled_at', models.DateTimeField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('status', models.CharField(choices=[('Pendente', 'Pendente'), ('Em Andamento', 'Em Andamento'), ('Concluída', 'Concluída'), ('Cancelada', 'Cancelada')], default='Pendente', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('candidate', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='activities', to='core.candidate')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name='AuditEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(max_length=64)),
                ('object_type', models.CharField(blank=True, max_length=64, null=True)),
                ('object_id', models.IntegerField(blank=True, null=True)),
                ('detail', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['action', 'created_at'], name='core_audite_action_2f9c1e_idx'),
                    models.Index(fields=['object_type', 'object_id', 'created_at'], name='core_audite_object__8d4b7a_idx'),
                ],
            },
        ),
    ]
