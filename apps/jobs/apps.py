from django.apps import AppConfig


class JobsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.jobs'
    label = 'jobs'
    verbose_name = 'Background Jobs'

    def ready(self):
        import apps.jobs.tasks  # noqa: F401
