from rest_framework import serializers

from core.models import Candidate, CandidateActivity
from .common import CleanCharField


class PublicCandidateSerializer(serializers.Serializer):
    fullName = CleanCharField(max_length=255)
    email = serializers.EmailField()
    phone = CleanCharField(max_length=32)
    desiredPosition = CleanCharField(max_length=100)
    experienceYears = serializers.IntegerField(min_value=0, max_value=80, default=0)
    city = CleanCharField(required=False, allow_blank=True, max_length=100)
    availability = CleanCharField(required=False, allow_blank=True, max_length=50)
    salaryExpectation = CleanCharField(required=False, allow_blank=True, max_length=50)
    lgpdConsent = serializers.BooleanField()

    def validate_fullName(self, v):
        if len(v) < 3:
            raise serializers.ValidationError('Nome muito curto')
        return v

    def validate_lgpdConsent(self, v):
        if not v:
            raise serializers.ValidationError('É necessário aceitar os termos da LGPD')
        return v


class CandidateSerializer(serializers.Serializer):
    FIELD_MAP = {
        'fullName': 'full_name',
        'email': 'email',
        'phone': 'phone',
        'desiredPosition': 'desired_position',
        'experienceYears': 'experience_years',
        'curriculumUrl': 'curriculum_url',
        'city': 'city',
        'state': 'state',
        'availability': 'availability',
        'salaryExpectation': 'salary_expectation',
        'status': 'status',
        'source': 'source',
        'lgpdConsent': 'lgpd_consent',
        'notes': 'notes',
    }

    fullName = CleanCharField(max_length=255)
    email = serializers.EmailField()
    phone = CleanCharField(max_length=32)
    desiredPosition = CleanCharField(max_length=100)
    experienceYears = serializers.IntegerField(min_value=0, max_value=80, required=False)
    curriculumUrl = serializers.URLField(required=False, allow_blank=True)
    city = CleanCharField(required=False, allow_blank=True, max_length=100)
    state = CleanCharField(required=False, max_length=2)
    availability = CleanCharField(required=False, allow_blank=True, max_length=50)
    salaryExpectation = CleanCharField(required=False, allow_blank=True, max_length=50)
    status = serializers.ChoiceField(choices=Candidate.STATUS_CHOICES, required=False)
    source = serializers.ChoiceField(choices=Candidate.SOURCE_CHOICES, required=False)
    lgpdConsent = serializers.BooleanField(required=False)
    notes = CleanCharField(required=False, allow_blank=True)

    def to_model_fields(self) -> dict:
        return {self.FIELD_MAP[k]: v for k, v in self.validated_data.items()}


class CandidateFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Candidate.STATUS_CHOICES, required=False)
    position = serializers.CharField(required=False, allow_blank=True)
    city = serializers.CharField(required=False, allow_blank=True)
    source = serializers.ChoiceField(choices=Candidate.SOURCE_CHOICES, required=False)
    q = serializers.CharField(required=False, allow_blank=True)
    dateFrom = serializers.DateField(required=False)
    dateTo = serializers.DateField(required=False)


class CandidateActivitySerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=CandidateActivity.TYPE_CHOICES, default='Anotação')
    title = CleanCharField(max_length=255)
    description = CleanCharField(required=False, allow_blank=True)
    scheduledAt = serializers.DateTimeField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=CandidateActivity.STATUS_CHOICES, required=False, default='Pendente')
