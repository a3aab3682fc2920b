from django.apps import AppConfig

class CoreConfig(AppConfig):
    # Profile użytkowników (nazwa wyświetlana w powiadomieniach)
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.core'
    label = 'core'
    verbose_name = 'User profiles'
