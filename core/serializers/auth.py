from rest_framework import serializers


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Usuário não pode ser vazio')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Senha não pode ser vazia')
        return v
