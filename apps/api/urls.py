from django.urls import path

from apps.api.views import (
    ApiRootView,
    JournalsView,
    PapersView,
    ResearchInterestAsyncView,
    ResearchInterestStatusView,
    ResearchInterestView,
)

urlpatterns = [
    path("", ApiRootView.as_view(), name="api-root"),
    path("research_interest", ResearchInterestView.as_view(), name="research-interest"),
    path(
        "research_interest/async",
        ResearchInterestAsyncView.as_view(),
        name="research-interest-async",
    ),
    path(
        "research_interest/<str:job_id>",
        ResearchInterestStatusView.as_view(),
        name="research-interest-status",
    ),
    path("papers", PapersView.as_view(), name="papers"),
    path("journals", JournalsView.as_view(), name="journals"),
]
