from rest_framework import serializers

from core.models import MedicalRecord
from .common import CleanCharField


class MedicalRecordSerializer(serializers.Serializer):
    specialty = serializers.ChoiceField(choices=MedicalRecord.SPECIALTY_CHOICES)
    recordDate = serializers.DateField(required=False)
    shift = serializers.ChoiceField(choices=MedicalRecord.SHIFT_CHOICES, required=False, default='SD')
    professionalRegistry = CleanCharField(required=False, allow_blank=True, max_length=50)
    content = serializers.DictField(required=False, default=dict)


class MedicalRecordUpdateSerializer(serializers.Serializer):
    shift = serializers.ChoiceField(choices=MedicalRecord.SHIFT_CHOICES, required=False)
    professionalRegistry = CleanCharField(required=False, allow_blank=True, max_length=50)
    content = serializers.DictField(required=False)


class SignSerializer(serializers.Serializer):
    signatureType = serializers.ChoiceField(
        choices=['digital_certificate', 'institutional'], required=False, default='institutional'
    )
    signerCpf = CleanCharField(required=False, allow_blank=True, max_length=14)
    signerRegistry = CleanCharField(required=False, allow_blank=True, max_length=50)


class RecordFilterSerializer(serializers.Serializer):
    dateFrom = serializers.DateField(required=False)
    dateTo = serializers.DateField(required=False)
    specialty = serializers.ChoiceField(choices=MedicalRecord.SPECIALTY_CHOICES, required=False)
    shift = serializers.ChoiceField(choices=MedicalRecord.SHIFT_CHOICES, required=False)
    q = serializers.CharField(required=False, allow_blank=True)
