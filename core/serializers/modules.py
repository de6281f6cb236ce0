from rest_framework import serializers

from core.modules import get_registry, role_errors


class ModuleSelectionSerializer(serializers.Serializer):
    """A proposed set of module ids.

    Unknown ids are accepted here so the validator can report them; use
    ``strict=True`` in the context to reject them before anything is stored.
    With ``role`` in the context, modules above that role are rejected too.
    """
    modules = serializers.ListField(child=serializers.CharField(max_length=50), allow_empty=True)

    def validate_modules(self, v):
        ids = list(dict.fromkeys(v))
        if self.context.get('strict'):
            unknown = sorted(set(ids).difference(get_registry()))
            if unknown:
                raise serializers.ValidationError([f"Módulo desconhecido: {m}" for m in unknown])
        if 'role' in self.context:
            errors = role_errors(ids, self.context['role'])
            if errors:
                raise serializers.ValidationError(errors)
        return ids


class ModuleToggleSerializer(serializers.Serializer):
    moduleId = serializers.CharField(max_length=50)
    confirm = serializers.BooleanField(required=False, default=False)

    def validate_moduleId(self, v):
        if v not in get_registry():
            raise serializers.ValidationError(f"Módulo desconhecido: {v}")
        return v
