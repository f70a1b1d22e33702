"""Baby and profile endpoints."""

from fastapi import APIRouter, Depends, Request, Response, status

from baby_profiles.api.errors import error_response
from baby_profiles.api.guards import get_caller, get_container, require_session
from baby_profiles.api.models import BabyForm, ProfileForm
from baby_profiles.api.serializers import (
    serialize_baby,
    serialize_choice,
    serialize_profile,
)
from baby_profiles.domain.errors import RecordsError
from baby_profiles.domain.models import Session

router = APIRouter(tags=["records"], dependencies=[Depends(require_session)])


@router.get("/babies")
def list_babies(request: Request) -> dict[str, object]:
    """Return the caller's babies."""
    babies = get_caller(request).baby_service.list_babies()
    return {"babies": [serialize_baby(baby) for baby in babies]}


@router.get("/babies/choices")
def list_baby_choices(request: Request) -> dict[str, object]:
    """Return the caller's babies for selection lists."""
    choices = get_caller(request).baby_service.list_baby_choices()
    return {"babies": [serialize_choice(choice) for choice in choices]}


@router.post("/babies", status_code=status.HTTP_201_CREATED, response_model=None)
def create_baby(
    form: BabyForm, request: Request, session: Session = Depends(require_session)
) -> Response | dict[str, object]:
    """Register a baby keyed by name and date of birth."""
    container = get_container(request)
    caller = get_caller(request)
    try:
        with container.inflight_guard.hold(session.user_id, "create_baby"):
            baby = caller.baby_service.create_baby(form.name, form.dob, form.note)
    except RecordsError as exc:
        return error_response(
            exc, container.settings, form=form.model_dump(mode="json")
        )
    return {"baby": serialize_baby(baby)}


@router.get("/babies/{baby_id}")
def get_baby(baby_id: str, request: Request) -> dict[str, object]:
    """Return one of the caller's babies."""
    baby = get_caller(request).baby_service.get_baby(baby_id)
    return {"baby": serialize_baby(baby)}


@router.put("/babies/{baby_id}", response_model=None)
def update_baby(
    baby_id: str,
    form: BabyForm,
    request: Request,
    session: Session = Depends(require_session),
) -> Response | dict[str, object]:
    """Edit a baby's name, date of birth or note."""
    container = get_container(request)
    caller = get_caller(request)
    try:
        with container.inflight_guard.hold(session.user_id, "update_baby", baby_id):
            baby = caller.baby_service.update_baby(
                baby_id, form.name, form.dob, form.note
            )
    except RecordsError as exc:
        return error_response(
            exc, container.settings, form=form.model_dump(mode="json")
        )
    return {"baby": serialize_baby(baby)}


@router.delete("/babies/{baby_id}")
def delete_baby(
    baby_id: str,
    request: Request,
    confirm: bool = False,
    session: Session = Depends(require_session),
) -> dict[str, str]:
    """Delete a baby; requires ``confirm=true``."""
    container = get_container(request)
    with container.inflight_guard.hold(session.user_id, "delete_baby", baby_id):
        get_caller(request).baby_service.delete_baby(baby_id, confirmed=confirm)
    return {"status": "deleted"}


@router.get("/babies/{baby_id}/profiles")
def list_profiles(baby_id: str, request: Request) -> dict[str, object]:
    """Return the caller's profiles for a baby, newest first."""
    profiles = get_caller(request).profile_service.list_profiles(baby_id)
    return {"profiles": [serialize_profile(profile) for profile in profiles]}


@router.post(
    "/babies/{baby_id}/profiles",
    status_code=status.HTTP_201_CREATED,
    response_model=None,
)
def create_profile(
    baby_id: str,
    form: ProfileForm,
    request: Request,
    session: Session = Depends(require_session),
) -> Response | dict[str, object]:
    """Record a new assessment profile for a baby."""
    container = get_container(request)
    caller = get_caller(request)
    try:
        with container.inflight_guard.hold(session.user_id, "create_profile", baby_id):
            profile = caller.profile_service.create_profile(baby_id, form.answers)
    except RecordsError as exc:
        return error_response(
            exc, container.settings, form=form.model_dump(mode="json")
        )
    return {"profile": serialize_profile(profile)}


@router.get("/profiles/{profile_id}")
def get_profile(profile_id: str, request: Request) -> dict[str, object]:
    """Return one of the caller's profiles."""
    profile = get_caller(request).profile_service.get_profile(profile_id)
    return {"profile": serialize_profile(profile)}


@router.put("/profiles/{profile_id}", response_model=None)
def update_profile(
    profile_id: str,
    form: ProfileForm,
    request: Request,
    session: Session = Depends(require_session),
) -> Response | dict[str, object]:
    """Replace a profile's answers."""
    container = get_container(request)
    caller = get_caller(request)
    try:
        with container.inflight_guard.hold(
            session.user_id, "update_profile", profile_id
        ):
            profile = caller.profile_service.update_profile(profile_id, form.answers)
    except RecordsError as exc:
        return error_response(
            exc, container.settings, form=form.model_dump(mode="json")
        )
    return {"profile": serialize_profile(profile)}


@router.delete("/profiles/{profile_id}")
def delete_profile(
    profile_id: str,
    request: Request,
    confirm: bool = False,
    session: Session = Depends(require_session),
) -> dict[str, str]:
    """Delete a profile; requires ``confirm=true``."""
    container = get_container(request)
    caller = get_caller(request)
    with container.inflight_guard.hold(session.user_id, "delete_profile", profile_id):
        caller.profile_service.delete_profile(profile_id, confirmed=confirm)
    return {"status": "deleted"}
