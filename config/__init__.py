from .settings import DEFAULT_SETTINGS, PROVIDER_NAME
