from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from rest_framework.authtoken.models import Token

from core.access import primary_role


class Command(BaseCommand):
    help = "Genera o rota el token Bearer de un usuario del API."

    def add_arguments(self, parser):
        parser.add_argument("--username", required=True, help="Nombre de usuario")
        parser.add_argument(
            "--rotate",
            action="store_true",
            help="Invalida el token vigente y emite uno nuevo.",
        )

    def handle(self, *args, **options):
        username = (options.get("username") or "").strip()
        if not username:
            raise CommandError("Debes enviar --username.")

        user = get_user_model().objects.filter(username__iexact=username).first()
        if user is None:
            raise CommandError(f"Usuario no encontrado: {username}")
        if not user.is_active:
            raise CommandError(f"El usuario {user.username} está deshabilitado.")

        if options.get("rotate"):
            Token.objects.filter(user=user).delete()
            token = Token.objects.create(user=user)
            action = "rotated"
        else:
            token, created = Token.objects.get_or_create(user=user)
            action = "created" if created else "existing"

        self.stdout.write(
            self.style.SUCCESS(
                f"TOKEN_READY username={user.username} rol={primary_role(user) or '-'} action={action} token={token.key}"
            )
        )
