from rest_framework import serializers

from core.models import Employee, UNIT_CHOICES
from .common import CleanCharField


class ProfessionalLicenseSerializer(serializers.Serializer):
    council = serializers.ChoiceField(choices=Employee.COUNCIL_CHOICES)
    licenseNumber = CleanCharField(required=False, allow_blank=True, max_length=30)
    expiryDate = serializers.DateField(required=False, allow_null=True)

    def validate(self, attrs):
        if attrs['council'] != 'Não Possui' and not attrs.get('licenseNumber'):
            raise serializers.ValidationError({'licenseNumber': 'Número do registro é obrigatório'})
        return attrs


class DatedItemSerializer(serializers.Serializer):
    """Exam or vaccine entry; anything with an optional ``expiryDate``."""
    type = CleanCharField(required=False, allow_blank=True, max_length=50)
    dose = CleanCharField(required=False, allow_blank=True, max_length=20)
    vaccineType = CleanCharField(required=False, allow_blank=True, max_length=50)
    result = CleanCharField(required=False, allow_blank=True, max_length=30)
    examDate = serializers.DateField(required=False, allow_null=True)
    applicationDate = serializers.DateField(required=False, allow_null=True)
    expiryDate = serializers.DateField(required=False, allow_null=True)
    notes = CleanCharField(required=False, allow_blank=True, max_length=255)


class VacationSerializer(serializers.Serializer):
    startDate = serializers.DateField()
    endDate = serializers.DateField()
    days = serializers.IntegerField(min_value=1, max_value=60)
    period = CleanCharField(max_length=20)
    status = serializers.ChoiceField(choices=['Programadas', 'Em Andamento', 'Concluídas'], default='Programadas')

    def validate(self, attrs):
        if attrs['endDate'] < attrs['startDate']:
            raise serializers.ValidationError({'endDate': 'Fim das férias antes do início'})
        return attrs


def _dates_to_iso(items):
    return [{k: (v.isoformat() if hasattr(v, 'isoformat') else v) for k, v in item.items()} for item in items]


class EmployeeSerializer(serializers.Serializer):
    """Employee payload in the camelCase shape the back office sends."""
    FIELD_MAP = {
        'fullName': 'full_name',
        'cpf': 'cpf',
        'rg': 'rg',
        'birthDate': 'birth_date',
        'address': 'address',
        'position': 'position',
        'unit': 'unit',
        'status': 'status',
        'photo': 'photo',
        'observations': 'observations',
        'receivesTransportation': 'receives_transportation',
        'employmentType': 'employment_type',
        'exitDate': 'exit_date',
        'exitReason': 'exit_reason',
        'covidVaccines': 'covid_vaccines',
        'medicalExams': 'medical_exams',
        'generalVaccines': 'general_vaccines',
        'vacations': 'vacations',
        'employmentData': 'employment_data',
    }
    JSON_LISTS = ('covidVaccines', 'medicalExams', 'generalVaccines', 'vacations')

    fullName = CleanCharField(max_length=255)
    cpf = CleanCharField(required=False, allow_blank=True, max_length=14)
    rg = CleanCharField(required=False, allow_blank=True, max_length=20)
    birthDate = serializers.DateField(required=False, allow_null=True)
    address = CleanCharField(required=False, allow_blank=True, max_length=255)
    position = CleanCharField(max_length=100)
    unit = serializers.ChoiceField(choices=UNIT_CHOICES)
    status = serializers.ChoiceField(choices=Employee.STATUS_CHOICES, required=False)
    photo = serializers.URLField(required=False, allow_blank=True)
    observations = CleanCharField(required=False, allow_blank=True)
    receivesTransportation = serializers.BooleanField(required=False)
    professionalLicense = ProfessionalLicenseSerializer(required=False)
    employmentType = serializers.ChoiceField(choices=Employee.EMPLOYMENT_TYPE_CHOICES, required=False)
    exitDate = serializers.DateField(required=False, allow_null=True)
    exitReason = CleanCharField(required=False, allow_blank=True, max_length=100)
    covidVaccines = DatedItemSerializer(many=True, required=False)
    medicalExams = DatedItemSerializer(many=True, required=False)
    generalVaccines = DatedItemSerializer(many=True, required=False)
    vacations = VacationSerializer(many=True, required=False)
    employmentData = serializers.DictField(required=False)

    def validate(self, attrs):
        instance = self.instance
        status = attrs.get('status', getattr(instance, 'status', 'Ativo'))
        if status == 'Inativo' and not attrs.get('exitDate', getattr(instance, 'exit_date', None)):
            raise serializers.ValidationError({'exitDate': 'Data de saída é obrigatória para colaboradores inativos'})
        return attrs

    def to_model_fields(self) -> dict:
        out = {}
        for key, value in self.validated_data.items():
            if key == 'professionalLicense':
                out['license_council'] = value['council']
                out['license_number'] = value.get('licenseNumber', '')
                out['license_expiry_date'] = value.get('expiryDate')
                continue
            if key in self.JSON_LISTS:
                value = _dates_to_iso(value)
            out[self.FIELD_MAP[key]] = value
        return out


class EmployeeListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Employee.STATUS_CHOICES, required=False)
    unit = serializers.ChoiceField(choices=UNIT_CHOICES, required=False)
    position = serializers.CharField(required=False, allow_blank=True)
    q = serializers.CharField(required=False, allow_blank=True)


class ExpiringQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(required=False, min_value=1, max_value=365, default=30)
