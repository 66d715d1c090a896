"""Account API views: identity, workspace and logout."""

from __future__ import annotations

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.accounts.constants import UserRole
from modules.accounts.dtos import OrderDraftDTO
from modules.accounts.permissions import HasProfile
from modules.accounts.serializers import MeSerializer, WorkspaceSerializer
from modules.accounts.services import WorkspaceService, allowed_views, resolve_view


def _workspace_payload(actor, state) -> dict:
    return {
        "last_view": resolve_view(actor.role, state.last_view),
        "order_draft": (
            state.order_draft.model_dump(mode="json") if state.order_draft else None
        ),
    }


class MeView(APIView):
    """GET /api/v1/me"""

    permission_classes = [HasProfile]

    def get(self, request: Request) -> Response:
        actor = request.actor
        state = WorkspaceService().load(request.user.pk)
        serializer = MeSerializer(
            {
                "user_id": request.user.pk,
                "username": request.user.get_username(),
                "role": actor.role,
                "role_label": UserRole(actor.role).label,
                "display_name": actor.display_name,
                "default_view": resolve_view(actor.role, state.last_view),
                "allowed_views": allowed_views(actor.role),
            }
        )
        return Response(serializer.data)


class WorkspaceView(APIView):
    """GET / PUT /api/v1/me/workspace"""

    permission_classes = [HasProfile]

    def get(self, request: Request) -> Response:
        state = WorkspaceService().load(request.user.pk)
        return Response(_workspace_payload(request.actor, state))

    def put(self, request: Request) -> Response:
        serializer = WorkspaceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        draft = data.get("order_draft")
        state = WorkspaceService().save(
            request.user.pk,
            last_view=data.get("last_view"),
            order_draft=OrderDraftDTO(**draft) if draft else None,
        )
        return Response(_workspace_payload(request.actor, state))


class WorkspaceDraftView(APIView):
    """DELETE /api/v1/me/workspace/draft"""

    permission_classes = [HasProfile]

    def delete(self, request: Request) -> Response:
        WorkspaceService().clear_draft(request.user.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class LogoutView(APIView):
    """POST /api/v1/auth/logout

    Tokens are stateless; logout only drops the server-side workspace.
    """

    def post(self, request: Request) -> Response:
        WorkspaceService().clear(request.user.pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
