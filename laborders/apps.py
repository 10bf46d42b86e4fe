from django.apps import AppConfig


class LabOrdersConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'laborders'
    verbose_name = 'Lab orders'

    def ready(self):
        from .services import build_services

        self.services = build_services()
