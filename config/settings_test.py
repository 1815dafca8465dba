from .settings import *  # noqa: F401,F403


DEBUG = True
SECRET_KEY = SECRET_KEY or "test-key"

# Entorno de pruebas local: evita dependencia de whitenoise en la venv local.
MIDDLEWARE = [m for m in MIDDLEWARE if m != "whitenoise.middleware.WhiteNoiseMiddleware"]
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "django.contrib.staticfiles.storage.StaticFilesStorage"},
}
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
LOGGING["loggers"] = {name: {**cfg, "level": "WARNING"} for name, cfg in LOGGING["loggers"].items()}
