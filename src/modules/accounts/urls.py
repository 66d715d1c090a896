"""Account URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.accounts.views import LogoutView, MeView, WorkspaceDraftView, WorkspaceView

urlpatterns = [
    path("me", MeView.as_view(), name="me"),
    path("me/workspace", WorkspaceView.as_view(), name="workspace"),
    path("me/workspace/draft", WorkspaceDraftView.as_view(), name="workspace-draft"),
    path("auth/logout", LogoutView.as_view(), name="logout"),
]
