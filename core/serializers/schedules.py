from rest_framework import serializers

from core.models import SCHEDULE_TYPE_CHOICES, SHIFT_CHOICES, UNIT_CHOICES, Employee
from .common import CleanCharField


class RosterSerializer(serializers.Serializer):
    """Identifies one month of one schedule: type, unit, month and year."""
    scheduleType = serializers.ChoiceField(choices=SCHEDULE_TYPE_CHOICES)
    unit = serializers.ChoiceField(choices=UNIT_CHOICES)
    month = serializers.IntegerField(min_value=1, max_value=12)
    year = serializers.IntegerField(min_value=2000, max_value=2100)


class RosterEmployeesQuerySerializer(serializers.Serializer):
    scheduleType = serializers.ChoiceField(choices=SCHEDULE_TYPE_CHOICES)
    unit = serializers.ChoiceField(choices=UNIT_CHOICES)


class ShiftUpdateSerializer(RosterSerializer):
    employeeId = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all(), source='employee')
    day = serializers.IntegerField(min_value=1, max_value=31)
    shift = serializers.ChoiceField(choices=SHIFT_CHOICES, allow_null=True)


class SubstitutionSerializer(RosterSerializer):
    employeeId = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all(), source='employee')
    day = serializers.IntegerField(min_value=1, max_value=31)
    substituteId = serializers.PrimaryKeyRelatedField(
        queryset=Employee.objects.all(), source='substitute', required=False, allow_null=True
    )
    substituteName = CleanCharField(required=False, allow_blank=True, max_length=255)
    reason = CleanCharField(required=False, allow_blank=True, max_length=255)

    def validate(self, attrs):
        if not attrs.get('substitute') and not attrs.get('substituteName'):
            raise serializers.ValidationError({'substituteName': 'Informe o substituto'})
        if attrs.get('substitute') and attrs['substitute'] == attrs['employee']:
            raise serializers.ValidationError({'substituteId': 'O colaborador não pode substituir a si mesmo'})
        return attrs


class SubstitutionKeySerializer(RosterSerializer):
    employeeId = serializers.IntegerField()
    day = serializers.IntegerField(min_value=1, max_value=31)
