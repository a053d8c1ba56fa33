from django.apps import AppConfig


class VisitmanConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "visitman"
    verbose_name = "Visitman - Visitas e Recompensas"

    def ready(self):
        from visitman.store import RecordStore

        # Application-wide record store handed to the services
        self.store = RecordStore()

        from visitman import notifications  # noqa: F401 (connects receivers)


def get_store():
    """The RecordStore owned by the installed Visitman app."""
    from django.apps import apps

    return apps.get_app_config("visitman").store
