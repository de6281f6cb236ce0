from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from core.models import User, UNIT_CHOICES
from core.modules import get_registry
from .common import CleanCharField


class UserCreateSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True)
    name = CleanCharField(max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, default='staff')
    position = CleanCharField(required=False, allow_blank=True, max_length=100)
    unit = serializers.ChoiceField(choices=UNIT_CHOICES, required=False, allow_blank=True)
    type = serializers.ChoiceField(choices=User.TYPE_CHOICES, required=False, default='matriz')
    modules = serializers.ListField(child=serializers.CharField(max_length=50), required=False)

    def validate_username(self, v):
        v = v.strip()
        if User.objects.filter(username__iexact=v).exists():
            raise serializers.ValidationError('Usuário já existe')
        return v

    def validate_password(self, v):
        try:
            validate_password(v)
        except DjangoValidationError as e:
            raise serializers.ValidationError(e.messages)
        return v

    def validate_modules(self, v):
        unknown = sorted(set(v).difference(get_registry()))
        if unknown:
            raise serializers.ValidationError([f"Módulo desconhecido: {m}" for m in unknown])
        return list(dict.fromkeys(v))


class UserUpdateSerializer(serializers.Serializer):
    name = CleanCharField(required=False, max_length=150)
    email = serializers.EmailField(required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES, required=False)
    position = CleanCharField(required=False, allow_blank=True, max_length=100)
    unit = serializers.ChoiceField(choices=UNIT_CHOICES, required=False, allow_blank=True)
    type = serializers.ChoiceField(choices=User.TYPE_CHOICES, required=False)
    isActive = serializers.BooleanField(required=False)
