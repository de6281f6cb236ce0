from rest_framework import serializers

from core.models import Guest, UNIT_CHOICES, DEPENDENCY_LEVEL_CHOICES
from .common import CleanCharField


class VaccineSerializer(serializers.Serializer):
    name = CleanCharField(max_length=100)
    date = serializers.DateField(required=False, allow_null=True)
    notes = CleanCharField(required=False, allow_blank=True, max_length=255)


class GuestSerializer(serializers.Serializer):
    """Guest payload; camelCase keys map one-to-one onto model fields."""
    FIELD_MAP = {
        'fullName': 'full_name',
        'gender': 'gender',
        'birthDate': 'birth_date',
        'cpf': 'cpf',
        'rg': 'rg',
        'hasCuratorship': 'has_curatorship',
        'imageUsageAuthorized': 'image_usage_authorized',
        'status': 'status',
        'admissionDate': 'admission_date',
        'exitDate': 'exit_date',
        'exitReason': 'exit_reason',
        'contractExpiryDate': 'contract_expiry_date',
        'dependencyLevel': 'dependency_level',
        'legalResponsibleRelationship': 'legal_responsible_relationship',
        'legalResponsibleCpf': 'legal_responsible_cpf',
        'financialResponsibleName': 'financial_responsible_name',
        'financialResponsiblePhone': 'financial_responsible_phone',
        'financialResponsibleEmail': 'financial_responsible_email',
        'unit': 'unit',
        'roomNumber': 'room_number',
        'healthPlan': 'health_plan',
        'hasPhysiotherapy': 'has_physiotherapy',
        'hasSpeechTherapy': 'has_speech_therapy',
        'vaccinationUpToDate': 'vaccination_up_to_date',
        'vaccines': 'vaccines',
    }

    fullName = CleanCharField(max_length=255)
    gender = serializers.ChoiceField(choices=Guest.GENDER_CHOICES, required=False, allow_blank=True)
    birthDate = serializers.DateField(required=False, allow_null=True)
    cpf = CleanCharField(required=False, allow_blank=True, max_length=14)
    rg = CleanCharField(required=False, allow_blank=True, max_length=20)
    hasCuratorship = serializers.BooleanField(required=False)
    imageUsageAuthorized = serializers.BooleanField(required=False)
    status = serializers.ChoiceField(choices=Guest.STATUS_CHOICES, required=False)
    admissionDate = serializers.DateField(required=False, allow_null=True)
    exitDate = serializers.DateField(required=False, allow_null=True)
    exitReason = serializers.ChoiceField(choices=Guest.EXIT_REASON_CHOICES, required=False, allow_blank=True)
    contractExpiryDate = serializers.DateField(required=False, allow_null=True)
    dependencyLevel = serializers.ChoiceField(choices=DEPENDENCY_LEVEL_CHOICES, required=False)
    legalResponsibleRelationship = CleanCharField(required=False, allow_blank=True, max_length=100)
    legalResponsibleCpf = CleanCharField(required=False, allow_blank=True, max_length=14)
    financialResponsibleName = CleanCharField(required=False, allow_blank=True, max_length=255)
    financialResponsiblePhone = CleanCharField(required=False, allow_blank=True, max_length=32)
    financialResponsibleEmail = serializers.EmailField(required=False, allow_blank=True)
    unit = serializers.ChoiceField(choices=UNIT_CHOICES)
    roomNumber = CleanCharField(required=False, allow_blank=True, max_length=20)
    healthPlan = CleanCharField(required=False, allow_blank=True, max_length=100)
    hasPhysiotherapy = serializers.BooleanField(required=False)
    hasSpeechTherapy = serializers.BooleanField(required=False)
    vaccinationUpToDate = serializers.BooleanField(required=False)
    vaccines = VaccineSerializer(many=True, required=False)

    def validate(self, attrs):
        # merge with the stored guest on partial updates before checking the exit rule
        instance = self.instance
        status = attrs.get('status', getattr(instance, 'status', 'Ativo'))
        exit_date = attrs.get('exitDate', getattr(instance, 'exit_date', None))
        exit_reason = attrs.get('exitReason', getattr(instance, 'exit_reason', ''))
        if status == 'Inativo':
            errors = {}
            if not exit_date:
                errors['exitDate'] = 'Data de saída é obrigatória para hóspedes inativos'
            if not exit_reason:
                errors['exitReason'] = 'Motivo de saída é obrigatório para hóspedes inativos'
            if errors:
                raise serializers.ValidationError(errors)
        return attrs

    def to_model_fields(self) -> dict:
        out = {}
        for key, value in self.validated_data.items():
            if key == 'vaccines':
                value = [
                    {**v, 'date': v['date'].isoformat() if v.get('date') else None}
                    for v in value
                ]
            out[self.FIELD_MAP[key]] = value
        return out


class GuestListQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Guest.STATUS_CHOICES, required=False)
    unit = serializers.ChoiceField(choices=UNIT_CHOICES, required=False)
    q = serializers.CharField(required=False, allow_blank=True)
