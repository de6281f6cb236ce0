from rest_framework import serializers

from core.models import Lead, LeadActivity, DEPENDENCY_LEVEL_CHOICES
from .common import CleanCharField


class ContactSerializer(serializers.Serializer):
    fullName = CleanCharField(required=False, allow_blank=True, max_length=255)
    relation = CleanCharField(required=False, allow_blank=True, max_length=50)
    phone = CleanCharField(required=False, allow_blank=True, max_length=32)
    email = serializers.EmailField(required=False, allow_blank=True)
    neighborhood = CleanCharField(required=False, allow_blank=True, max_length=100)
    unitId = serializers.IntegerField(required=False, allow_null=True)
    lgpdConsent = serializers.BooleanField(required=False, default=False)
    notes = CleanCharField(required=False, allow_blank=True)


class LeadSerializer(serializers.Serializer):
    contact = ContactSerializer(required=False)
    contactId = serializers.IntegerField(required=False, allow_null=True)
    stage = serializers.ChoiceField(choices=Lead.STAGE_CHOICES, required=False)
    source = CleanCharField(required=False, allow_blank=True, max_length=50)
    ownerId = serializers.IntegerField(required=False, allow_null=True)
    diagnosis = CleanCharField(required=False, allow_blank=True, max_length=255)
    dependencyGrade = serializers.ChoiceField(choices=DEPENDENCY_LEVEL_CHOICES, required=False)
    elderlyName = CleanCharField(required=False, allow_blank=True, max_length=255)
    elderlyAge = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=130)
    valueBand = CleanCharField(required=False, allow_blank=True, max_length=50)


class LeadFilterSerializer(serializers.Serializer):
    stage = serializers.ChoiceField(choices=Lead.STAGE_CHOICES, required=False)
    unitId = serializers.IntegerField(required=False)
    ownerId = serializers.IntegerField(required=False)
    q = serializers.CharField(required=False, allow_blank=True)
    createdFrom = serializers.DateField(required=False)
    createdTo = serializers.DateField(required=False)


class MoveSerializer(serializers.Serializer):
    """Board move; choices are checked by the view against the board's stages."""
    fromStage = serializers.CharField(max_length=30)
    toStage = serializers.CharField(max_length=30)


class LeadActivitySerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=LeadActivity.TYPE_CHOICES, default='task')
    title = CleanCharField(max_length=255)
    description = CleanCharField(required=False, allow_blank=True)
    dueAt = serializers.DateTimeField(required=False, allow_null=True)


class SendMessageSerializer(serializers.Serializer):
    body = CleanCharField(max_length=4096)

    def validate_body(self, v):
        if not v:
            raise serializers.ValidationError('Mensagem vazia')
        return v


class InboundMessageSerializer(serializers.Serializer):
    """Payload posted by the WhatsApp bot for every received message."""
    waFrom = serializers.CharField(max_length=32)
    waTo = serializers.CharField(max_length=32, required=False, allow_blank=True, default='')
    body = serializers.CharField(allow_blank=True)
    waMsgId = serializers.CharField(max_length=128, required=False, allow_blank=True, default='')
    notifyName = CleanCharField(required=False, allow_blank=True, max_length=255)


class ReportQuerySerializer(serializers.Serializer):
    days = serializers.IntegerField(required=False, min_value=1, max_value=3650, default=30)
    unitId = serializers.IntegerField(required=False)
