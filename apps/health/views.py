from __future__ import annotations

from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.responses import envelope_response
from apps.health.services import HealthCheckService


class HealthView(APIView):
    authentication_classes: list = []
    permission_classes: list = []

    def get(self, request: Request) -> Response:
        report = HealthCheckService().check()
        if report["status"] == "ok":
            return envelope_response("ok", "All checks passed", report)
        return envelope_response("service_unavailable", "One or more checks failed", report)
