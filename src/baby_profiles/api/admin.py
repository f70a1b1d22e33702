"""System management endpoints, restricted to the admin role."""

from fastapi import APIRouter, Depends, Request, Response

from baby_profiles.api.errors import error_response
from baby_profiles.api.guards import get_caller, get_container, require_admin
from baby_profiles.api.models import RoleForm
from baby_profiles.api.serializers import serialize_account
from baby_profiles.domain.errors import RecordsError
from baby_profiles.domain.models import Session

router = APIRouter(
    prefix="/system-management",
    tags=["admin"],
    dependencies=[Depends(require_admin)],
)


@router.get("/users")
def list_users(request: Request) -> dict[str, object]:
    """Return every account with its role."""
    users = get_caller(request).user_admin_service.list_users()
    return {"users": [serialize_account(user) for user in users]}


@router.put("/users/{user_id}/role", response_model=None)
def update_role(
    user_id: str,
    form: RoleForm,
    request: Request,
    session: Session = Depends(require_admin),
) -> Response | dict[str, str]:
    """Change an account's role through the privileged procedure."""
    container = get_container(request)
    try:
        with container.inflight_guard.hold(session.user_id, "update_role", user_id):
            get_caller(request).user_admin_service.update_role(user_id, form.role)
    except RecordsError as exc:
        return error_response(
            exc, container.settings, form=form.model_dump(mode="json")
        )
    return {"status": "updated", "role": form.role}


@router.delete("/users/{user_id}")
def delete_user(
    user_id: str,
    request: Request,
    confirm: bool = False,
    session: Session = Depends(require_admin),
) -> dict[str, str]:
    """Delete an account; requires ``confirm=true``."""
    container = get_container(request)
    with container.inflight_guard.hold(session.user_id, "delete_user", user_id):
        get_caller(request).user_admin_service.delete_user(
            user_id, confirmed=confirm
        )
    return {"status": "deleted"}
