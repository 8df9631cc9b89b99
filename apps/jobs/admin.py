from django.contrib import admin
from .models import JobExecution


@admin.register(JobExecution)
class JobExecutionAdmin(admin.ModelAdmin):
    list_display = ['job_name', 'status', 'trigger', 'attempts', 'started_at', 'duration_ms']
    list_filter = ['job_name', 'status', 'trigger', 'started_at']
    search_fields = ['job_name', 'execution_id', 'error']
    readonly_fields = [field.name for field in JobExecution._meta.fields]

    def has_add_permission(self, request):
        return False  # Executions are recorded by the job runner
