from rest_framework.authentication import TokenAuthentication


class BearerTokenAuthentication(TokenAuthentication):
    """Token de ``rest_framework.authtoken`` enviado como ``Authorization: Bearer <token>``."""

    keyword = "Bearer"
