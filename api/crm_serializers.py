from rest_framework import serializers

from crm.models import Cliente, ContactoCliente

from .fields import OptionalCharField


class CRMContactoSerializer(serializers.ModelSerializer):
    idContacto = serializers.IntegerField(source="id", read_only=True)
    idCliente = serializers.IntegerField(source="cliente_id", required=False, allow_null=True)
    nombreContacto = serializers.CharField(source="nombre", max_length=160)
    cargoContacto = OptionalCharField(source="cargo", max_length=120)
    telefonoContacto = OptionalCharField(source="telefono", max_length=40)
    correoContacto = serializers.EmailField(source="correo", required=False, allow_blank=True, allow_null=True)

    class Meta:
        model = ContactoCliente
        fields = [
            "idContacto",
            "idCliente",
            "nombreContacto",
            "cargoContacto",
            "telefonoContacto",
            "correoContacto",
        ]

    def validate_correoContacto(self, value):
        return value or ""


class CRMClienteSummarySerializer(serializers.ModelSerializer):
    idCliente = serializers.IntegerField(source="id", read_only=True)
    numeroDocumento = serializers.CharField(source="numero_documento", read_only=True)
    nombreCliente = serializers.CharField(source="nombre", read_only=True)

    class Meta:
        model = Cliente
        fields = ["idCliente", "numeroDocumento", "nombreCliente"]


class CRMClienteSerializer(serializers.ModelSerializer):
    idCliente = serializers.IntegerField(source="id", read_only=True)
    tipoDocumento = serializers.ChoiceField(source="tipo_documento", choices=Cliente.DOC_CHOICES, required=False)
    numeroDocumento = serializers.CharField(source="numero_documento", max_length=40)
    nombreCliente = serializers.CharField(source="nombre", max_length=180)
    direccionCliente = OptionalCharField(source="direccion", max_length=255)
    telefonoCliente = OptionalCharField(source="telefono", max_length=40)
    correoCliente = serializers.EmailField(source="correo", required=False, allow_blank=True, allow_null=True)
    fechaCreacion = serializers.DateTimeField(source="created_at", read_only=True)
    fechaActualizacion = serializers.DateTimeField(source="updated_at", read_only=True)
    contactosCliente = CRMContactoSerializer(source="contactos", many=True, read_only=True)

    class Meta:
        model = Cliente
        fields = [
            "idCliente",
            "tipoDocumento",
            "numeroDocumento",
            "nombreCliente",
            "direccionCliente",
            "telefonoCliente",
            "correoCliente",
            "fechaCreacion",
            "fechaActualizacion",
            "contactosCliente",
        ]

    def validate_numeroDocumento(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("El número de documento es obligatorio.")
        return value

    def validate_correoCliente(self, value):
        return value or ""
