import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Cliente",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "tipo_documento",
                    models.CharField(choices=[("NIT", "NIT"), ("Cédula", "Cédula")], default="NIT", max_length=20),
                ),
                ("numero_documento", models.CharField(max_length=40, unique=True)),
                ("nombre", models.CharField(max_length=180)),
                ("nombre_normalizado", models.CharField(db_index=True, editable=False, max_length=180)),
                ("direccion", models.CharField(blank=True, default="", max_length=255)),
                ("telefono", models.CharField(blank=True, default="", max_length=40)),
                ("correo", models.EmailField(blank=True, default="", max_length=254)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Cliente",
                "verbose_name_plural": "Clientes",
                "ordering": ["nombre", "id"],
            },
        ),
        migrations.CreateModel(
            name="ContactoCliente",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nombre", models.CharField(max_length=160)),
                ("cargo", models.CharField(blank=True, default="", max_length=120)),
                ("telefono", models.CharField(blank=True, default="", max_length=40)),
                ("correo", models.EmailField(blank=True, default="", max_length=254)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "cliente",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="contactos",
                        to="crm.cliente",
                    ),
                ),
            ],
            options={
                "verbose_name": "Contacto de cliente",
                "verbose_name_plural": "Contactos de cliente",
                "ordering": ["nombre", "id"],
            },
        ),
    ]
