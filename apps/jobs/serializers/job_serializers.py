from rest_framework import serializers
from ..models import JobExecution


class JobExecutionSerializer(serializers.ModelSerializer):

    class Meta:
        model = JobExecution
        fields = [
            'execution_id', 'job_name', 'status', 'trigger', 'attempts',
            'started_at', 'finished_at', 'duration_ms', 'result', 'error'
        ]
        read_only_fields = fields


class JobMonitoringSerializer(serializers.Serializer):
    job_name = serializers.CharField()
    description = serializers.CharField()
    schedule = serializers.CharField()
    is_running = serializers.BooleanField()
    total_executions = serializers.IntegerField()
    successful_executions = serializers.IntegerField()
    failed_executions = serializers.IntegerField()
    average_duration_ms = serializers.IntegerField(allow_null=True)
    last_execution = JobExecutionSerializer(allow_null=True)


class TriggerJobSerializer(serializers.Serializer):
    retry = serializers.BooleanField(required=False, default=False)
    max_retries = serializers.IntegerField(min_value=1, max_value=10, required=False)
