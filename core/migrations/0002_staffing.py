import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


UNITS = [('Botafogo', 'Botafogo'), ('Tijuca', 'Tijuca')]
SCHEDULE_TYPES = [('Geral', 'Geral'), ('Enfermagem', 'Enfermagem'), ('Nutrição', 'Nutrição')]


class Migration(migrations.Migration):

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Employee',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('full_name', models.CharField(max_length=255)),
                ('cpf', models.CharField(blank=True, db_index=True, max_length=14)),
                ('rg', models.CharField(blank=True, max_length=20)),
                ('birth_date', models.DateField(blank=True, null=True)),
                ('address', models.CharField(blank=True, max_length=255)),
                ('position', models.CharField(db_index=True, max_length=100)),
                ('unit', models.CharField(choices=UNITS, db_index=True, max_length=20)),
                ('status', models.CharField(choices=[('Ativo', 'Ativo'), ('Inativo', 'Inativo'), ('Afastado', 'Afastado'), ('Férias', 'Férias')], db_index=True, default='Ativo', max_length=10)),
                ('photo', models.URLField(blank=True)),
                ('observations', models.TextField(blank=True)),
                ('receives_transportation', models.BooleanField(default=False)),
                ('license_council', models.CharField(choices=[('COREN', 'COREN'), ('CRM', 'CRM'), ('CRF', 'CRF'), ('CRESS', 'CRESS'), ('CRN', 'CRN'), ('CREFITO', 'CREFITO'), ('CRA', 'CRA'), ('Outro', 'Outro'), ('Não Possui', 'Não Possui')], default='Não Possui', max_length=12)),
                ('license_number', models.CharField(blank=True, max_length=30)),
                ('license_expiry_date', models.DateField(blank=True, null=True)),
                ('employment_type', models.CharField(choices=[('CLT', 'CLT'), ('Contrato', 'Contrato'), ('Terceirizado', 'Terceirizado'), ('Estágio', 'Estágio'), ('Outro', 'Outro')], default='CLT', max_length=15)),
                ('exit_date', models.DateField(blank=True, null=True)),
                ('exit_reason', models.CharField(blank=True, max_length=100)),
                ('covid_vaccines', models.JSONField(blank=True, default=list)),
                ('medical_exams', models.JSONField(blank=True, default=list)),
                ('general_vaccines', models.JSONField(blank=True, default=list)),
                ('vacations', models.JSONField(blank=True, default=list)),
                ('employment_data', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name='WorkSchedule',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('schedule_type', models.CharField(choices=SCHEDULE_TYPES, max_length=12)),
                ('unit', models.CharField(choices=UNITS, max_length=20)),
                ('month', models.PositiveSmallIntegerField()),
                ('year', models.PositiveSmallIntegerField()),
                ('days', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='schedules', to='core.employee')),
            ],
            options={
                'constraints': [
                    models.UniqueConstraint(fields=('employee', 'schedule_type', 'unit', 'month', 'year'), name='uniq_work_schedule_month'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ScheduleSubstitution',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('schedule_type', models.CharField(choices=SCHEDULE_TYPES, max_length=12)),
                ('unit', models.CharField(choices=UNITS, max_length=20)),
                ('month', models.PositiveSmallIntegerField()),
                ('year', models.PositiveSmallIntegerField()),
                ('day', models.PositiveSmallIntegerField()),
                ('substitute_name', models.CharField(max_length=255)),
                ('reason', models.CharField(blank=True, max_length=255)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='substitutions', to='core.employee')),
                ('substitute', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='covered_shifts', to='core.employee')),
            ],
            options={
                'constraints': [
                    models.UniqueConstraint(fields=('employee', 'schedule_type', 'unit', 'month', 'year', 'day'), name='uniq_schedule_substitution_day'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SobreavisoEmployee',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('full_name', models.CharField(max_length=255)),
                ('cpf', models.CharField(blank=True, max_length=14)),
                ('position', models.CharField(max_length=100)),
                ('phone', models.CharField(max_length=32)),
                ('pix', models.CharField(blank=True, max_length=100)),
                ('unit', models.CharField(choices=UNITS + [('Ambas', 'Ambas')], max_length=20)),
                ('status', models.CharField(choices=[('Ativo', 'Ativo'), ('Inativo', 'Inativo')], db_index=True, default='Ativo', max_length=10)),
                ('observations', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
    ]
