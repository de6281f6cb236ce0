import bleach
from rest_framework import serializers


def clean_text(v):
    """Strip markup from free text typed by users."""
    return bleach.clean((v or '').strip(), tags=[], strip=True)


class CleanCharField(serializers.CharField):
    def to_internal_value(self, data):
        return clean_text(super().to_internal_value(data))
