from rest_framework import serializers


class OptionalCharField(serializers.CharField):
    """Texto opcional: ``null`` o ausente se guarda como cadena vacía."""

    def __init__(self, **kwargs):
        kwargs.setdefault("required", False)
        kwargs.setdefault("allow_blank", True)
        kwargs.setdefault("allow_null", True)
        super().__init__(**kwargs)

    def validate_empty_values(self, data):
        if data is None:
            return (True, "")
        return super().validate_empty_values(data)
