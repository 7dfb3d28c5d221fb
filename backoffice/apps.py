from django.apps import AppConfig


class BackofficeConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'backoffice'
    verbose_name = 'Hotel Back-Office'

    def ready(self):
        """Import signals when app is ready."""
        import backoffice.signals  # noqa
