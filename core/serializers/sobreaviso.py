from rest_framework import serializers

from core.models import ON_CALL_UNIT_CHOICES, UNIT_CHOICES, SobreavisoEmployee
from .common import CleanCharField


class SobreavisoSerializer(serializers.Serializer):
    FIELD_MAP = {
        'fullName': 'full_name',
        'cpf': 'cpf',
        'position': 'position',
        'phone': 'phone',
        'pix': 'pix',
        'unit': 'unit',
        'status': 'status',
        'observations': 'observations',
    }

    fullName = CleanCharField(max_length=255)
    cpf = CleanCharField(required=False, allow_blank=True, max_length=14)
    position = CleanCharField(max_length=100)
    phone = CleanCharField(max_length=32)
    pix = CleanCharField(required=False, allow_blank=True, max_length=100)
    unit = serializers.ChoiceField(choices=ON_CALL_UNIT_CHOICES)
    status = serializers.ChoiceField(choices=SobreavisoEmployee.STATUS_CHOICES, required=False)
    observations = CleanCharField(required=False, allow_blank=True)

    def to_model_fields(self) -> dict:
        return {self.FIELD_MAP[k]: v for k, v in self.validated_data.items()}


class SobreavisoQuerySerializer(serializers.Serializer):
    unit = serializers.ChoiceField(choices=UNIT_CHOICES, required=False)
    status = serializers.ChoiceField(choices=SobreavisoEmployee.STATUS_CHOICES, required=False)
    q = serializers.CharField(required=False, allow_blank=True)
