"""
Administrative job views: trigger runs and read monitoring data.
"""
from rest_framework.permissions import IsAdminUser
from rest_framework.views import APIView

from apps.common.utils import success_response
from .registry import registered_jobs
from .serializers import JobExecutionSerializer, JobMonitoringSerializer, TriggerJobSerializer
from .services import JobRunner


class JobListView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        data = [
            JobMonitoringSerializer(JobRunner.get_monitoring_data(job.name)).data
            for job in registered_jobs()
        ]
        return success_response(data)


class JobStatusView(APIView):
    """Monitoring data plus recent executions, newest first"""
    permission_classes = [IsAdminUser]

    def get(self, request, job_name):
        monitoring = JobMonitoringSerializer(JobRunner.get_monitoring_data(job_name)).data
        try:
            limit = min(max(int(request.query_params.get('limit', 10)), 1), 100)
        except ValueError:
            limit = 10
        recent = JobRunner.get_recent_executions(job_name, limit=limit)
        return success_response({
            'monitoring': monitoring,
            'recent_executions': JobExecutionSerializer(recent, many=True).data,
        })


class TriggerJobView(APIView):
    permission_classes = [IsAdminUser]

    def post(self, request, job_name):
        serializer = TriggerJobSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if data['retry']:
            execution = JobRunner.run_with_retry(job_name, max_retries=data.get('max_retries'))
        else:
            execution = JobRunner.run(job_name)
        return success_response(
            JobExecutionSerializer(execution).data,
            message=f"Job '{job_name}' {execution.status}",
        )
