"""Tests for the profile service."""

import pytest

from baby_profiles.domain.errors import (
    ConfirmationRequired,
    RecordNotFound,
    RemoteFailure,
    StoreError,
    TransientAllocationConflict,
    ValidationFailed,
)
from baby_profiles.services.profiles import ProfileService, validate_answers
from baby_profiles.services.sessions import SessionManager
from tests.conftest import (
    FIXED_NOW,
    OTHER_SESSION,
    USER_SESSION,
    FakeAuthGateway,
    InMemoryBabyRepository,
    InMemoryProfileRepository,
    make_baby,
    sign_in,
)

ANSWERS = {"q1": 3, "q2": 4.5, "notes": "sleeps well"}


@pytest.fixture
def service(
    profile_repository: InMemoryProfileRepository,
    baby_repository: InMemoryBabyRepository,
    session_manager: SessionManager,
) -> ProfileService:
    baby_repository.babies["Aria_20230501"] = make_baby()
    return ProfileService(
        repository=profile_repository,
        baby_repository=baby_repository,
        session_manager=session_manager,
        max_attempts=3,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture(autouse=True)
def signed_in(auth_gateway: FakeAuthGateway, session_manager: SessionManager) -> None:
    sign_in(auth_gateway, USER_SESSION)


def test_sequential_creates_are_numbered(service: ProfileService) -> None:
    ids = [service.create_profile("Aria_20230501", ANSWERS).id for _ in range(3)]

    assert ids == ["Aria_20230501_1", "Aria_20230501_2", "Aria_20230501_3"]


def test_created_profile_carries_audit_fields(service: ProfileService) -> None:
    profile = service.create_profile("Aria_20230501", ANSWERS)

    assert profile.baby_id == "Aria_20230501"
    assert profile.user_id == USER_SESSION.user_id
    assert profile.answers == ANSWERS
    assert profile.created_at == profile.updated_at == FIXED_NOW
    assert profile.created_by == "parent@example.com"


def test_race_on_count_is_retried(
    service: ProfileService, profile_repository: InMemoryProfileRepository
) -> None:
    service.create_profile("Aria_20230501", ANSWERS)
    # Another writer read the same count before this insert landed.
    profile_repository.stale_counts = [0]

    profile = service.create_profile("Aria_20230501", ANSWERS)

    assert profile.id == "Aria_20230501_2"
    assert profile_repository.insert_attempts[-2:] == [
        "Aria_20230501_1",
        "Aria_20230501_2",
    ]


def test_exhausted_retries_raise_retryable_conflict(
    service: ProfileService, profile_repository: InMemoryProfileRepository
) -> None:
    service.create_profile("Aria_20230501", ANSWERS)
    profile_repository.forced_conflicts = 3

    with pytest.raises(TransientAllocationConflict) as excinfo:
        service.create_profile("Aria_20230501", ANSWERS)

    assert excinfo.value.retryable
    assert profile_repository.insert_attempts[1:] == ["Aria_20230501_2"] * 3


def test_create_after_deleting_an_earlier_profile_skips_past_the_gap(
    service: ProfileService, profile_repository: InMemoryProfileRepository
) -> None:
    first = service.create_profile("Aria_20230501", ANSWERS)
    service.create_profile("Aria_20230501", ANSWERS)
    service.delete_profile(first.id, confirmed=True)

    third = service.create_profile("Aria_20230501", ANSWERS)
    fourth = service.create_profile("Aria_20230501", ANSWERS)

    assert third.id == "Aria_20230501_3"
    assert fourth.id == "Aria_20230501_4"
    assert sorted(profile_repository.profiles) == [
        "Aria_20230501_2",
        "Aria_20230501_3",
        "Aria_20230501_4",
    ]


def test_other_insert_errors_are_not_retried(
    service: ProfileService, profile_repository: InMemoryProfileRepository
) -> None:
    profile_repository.error = StoreError("timeout")

    with pytest.raises(RemoteFailure):
        service.create_profile("Aria_20230501", ANSWERS)

    assert len(profile_repository.insert_attempts) == 1


def test_create_for_foreign_baby_is_not_found(
    service: ProfileService, baby_repository: InMemoryBabyRepository
) -> None:
    baby_repository.babies["Ben_20230501"] = make_baby(
        baby_id="Ben_20230501", user_id=OTHER_SESSION.user_id, name="Ben"
    )

    with pytest.raises(RecordNotFound):
        service.create_profile("Ben_20230501", ANSWERS)


def test_create_rejects_empty_answers(service: ProfileService) -> None:
    with pytest.raises(ValidationFailed):
        service.create_profile("Aria_20230501", {})


@pytest.mark.parametrize(
    "answers",
    [{"q1": True}, {"": 1}, {"q1": [1, 2]}, {"q1": None}],
)
def test_validate_answers_rejects_malformed(answers) -> None:
    with pytest.raises(ValidationFailed):
        validate_answers(answers)


def test_list_get_and_update(service: ProfileService) -> None:
    first = service.create_profile("Aria_20230501", ANSWERS)
    second = service.create_profile("Aria_20230501", {"q1": 1})

    assert [p.id for p in service.list_profiles("Aria_20230501")] == [
        second.id,
        first.id,
    ]
    assert service.get_profile(first.id) == first

    updated = service.update_profile(first.id, {"q1": 5})

    assert updated.id == first.id
    assert updated.answers == {"q1": 5}


def test_foreign_profile_is_not_found(
    auth_gateway: FakeAuthGateway, service: ProfileService
) -> None:
    profile = service.create_profile("Aria_20230501", ANSWERS)
    sign_in(auth_gateway, OTHER_SESSION)

    with pytest.raises(RecordNotFound):
        service.get_profile(profile.id)
    with pytest.raises(RecordNotFound):
        service.update_profile(profile.id, ANSWERS)


def test_delete_requires_confirmation(
    service: ProfileService, profile_repository: InMemoryProfileRepository
) -> None:
    profile = service.create_profile("Aria_20230501", ANSWERS)

    with pytest.raises(ConfirmationRequired):
        service.delete_profile(profile.id)
    assert profile_repository.deleted == []

    service.delete_profile(profile.id, confirmed=True)
    assert profile.id not in profile_repository.profiles
