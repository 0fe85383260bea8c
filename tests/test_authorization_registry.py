"""Tests for the authorization state machine."""

import pytest

from acta_admin.domain.authorization import AccessRequest
from acta_admin.domain.errors import AdminConflictError, NotFoundError
from acta_admin.services.admins import AdminRegistry
from acta_admin.services.authorization import AuthorizationRegistry
from tests.conftest import FixedClock


def test_authorize_revoke_lifecycle(
    authorization_registry: AuthorizationRegistry,
) -> None:
    sender = "5211234567890"

    first = authorization_registry.authorize(sender, "user", actor="PANEL_WEB")
    assert first.applied
    listed = authorization_registry.list_authorized()
    assert [record.sender_id for record in listed.users] == [sender]

    second = authorization_registry.authorize(sender, "user", actor="PANEL_WEB")
    assert not second.applied

    revoked = authorization_registry.revoke(sender, "user")
    assert revoked.applied
    record = authorization_registry.repository.get_authorization(sender)
    assert record is not None
    assert record.authorized is False

    with pytest.raises(NotFoundError):
        authorization_registry.revoke(sender, "user")


def test_repeat_authorize_leaves_record_untouched(
    authorization_registry: AuthorizationRegistry, clock: FixedClock
) -> None:
    authorization_registry.authorize("5210000000001", "user", actor="PANEL_WEB")
    before = authorization_registry.repository.get_authorization("5210000000001")
    clock.advance(minutes=5)

    authorization_registry.authorize("5210000000001", "user", actor="PANEL_WEB")

    after = authorization_registry.repository.get_authorization("5210000000001")
    assert after == before


def test_authorize_admin_conflicts_without_creating_record(
    authorization_registry: AuthorizationRegistry, admin_registry: AdminRegistry
) -> None:
    admin_registry.add("A1", "Uno", "user", actor="PANEL_WEB")

    with pytest.raises(AdminConflictError):
        authorization_registry.authorize("A1", "user", actor="PANEL_WEB")

    assert authorization_registry.repository.get_authorization("A1") is None


def test_revoke_unknown_sender_is_not_found(
    authorization_registry: AuthorizationRegistry,
) -> None:
    with pytest.raises(NotFoundError):
        authorization_registry.revoke("5219999999999", "user")


def test_revoke_with_wrong_kind_is_not_found(
    authorization_registry: AuthorizationRegistry,
) -> None:
    authorization_registry.authorize("123@g.us", "group", actor="PANEL_WEB")

    with pytest.raises(NotFoundError):
        authorization_registry.revoke("123@g.us", "user")


def test_reauthorize_keeps_special_config(
    authorization_registry: AuthorizationRegistry,
) -> None:
    authorization_registry.authorize("5210000000002", "user", actor="PANEL_WEB")
    authorization_registry.update_special_config(
        "5210000000002", auto_framing=True, auto_api_upload=False, actor="PANEL_WEB"
    )
    authorization_registry.revoke("5210000000002", "user")

    outcome = authorization_registry.authorize(
        "5210000000002", "user", actor="PANEL_WEB"
    )

    assert outcome.applied
    assert authorization_registry.should_auto_frame("5210000000002")


def test_update_special_config_creates_unauthorized_record(
    authorization_registry: AuthorizationRegistry, clock: FixedClock
) -> None:
    result = authorization_registry.update_special_config(
        "777@g.us", auto_framing=True, auto_api_upload=True, actor="PANEL_WEB"
    )

    assert result.success
    record = authorization_registry.repository.get_authorization("777@g.us")
    assert record is not None
    assert record.sender_kind == "group"
    assert record.authorized is False
    assert record.configured_by == "PANEL_WEB"
    assert record.configured_at == clock.now
    assert authorization_registry.should_auto_upload("777@g.us")
    assert authorization_registry.list_authorized().total == 0


def test_update_special_config_rejects_blank_id(
    authorization_registry: AuthorizationRegistry,
) -> None:
    result = authorization_registry.update_special_config(
        "  ", auto_framing=True, auto_api_upload=True, actor="PANEL_WEB"
    )

    assert not result.success


def test_unknown_sender_has_default_config(
    authorization_registry: AuthorizationRegistry,
) -> None:
    assert not authorization_registry.should_auto_frame("nobody")
    assert not authorization_registry.should_auto_upload("nobody")


def test_admins_are_implicitly_authorized(
    authorization_registry: AuthorizationRegistry, admin_registry: AdminRegistry
) -> None:
    admin_registry.add("A1", "Uno", "user", actor="PANEL_WEB")

    assert authorization_registry.is_authorized("A1")
    assert not authorization_registry.is_authorized("5210000000003")


def test_list_authorized_partitions_by_kind(
    authorization_registry: AuthorizationRegistry,
) -> None:
    authorization_registry.authorize("5210000000004", "user", actor="PANEL_WEB")
    authorization_registry.authorize("555@g.us", "group", actor="PANEL_WEB")
    authorization_registry.authorize("5210000000005", "user", actor="PANEL_WEB")
    authorization_registry.revoke("5210000000005", "user")

    listed = authorization_registry.list_authorized()

    assert [r.sender_id for r in listed.users] == ["5210000000004"]
    assert [r.sender_id for r in listed.groups] == ["555@g.us"]
    assert listed.total == 2


def test_promote_to_admin_drops_active_authorization(
    authorization_registry: AuthorizationRegistry, admin_registry: AdminRegistry
) -> None:
    authorization_registry.authorize("X1", "user", actor="PANEL_WEB")

    result = authorization_registry.promote_to_admin(
        "X1", "Equis", "user", actor="PANEL_WEB"
    )

    assert result.success
    assert admin_registry.is_admin("X1")
    assert authorization_registry.list_authorized().total == 0
    record = authorization_registry.repository.get_authorization("X1")
    assert record is not None
    assert record.authorized is False


def test_failed_promotion_keeps_authorization(
    authorization_registry: AuthorizationRegistry,
) -> None:
    authorization_registry.authorize("X1", "user", actor="PANEL_WEB")

    result = authorization_registry.promote_to_admin("X1", "", "user", actor="x")

    assert not result.success
    assert authorization_registry.is_authorized("X1")
    assert authorization_registry.list_authorized().total == 1


def test_list_pending_requests_skips_authorized_admins_and_repeats(
    authorization_registry: AuthorizationRegistry,
    admin_registry: AdminRegistry,
    clock: FixedClock,
) -> None:
    repository = authorization_registry.repository
    for minutes, sender_id in enumerate(
        ["5211111111111", "5212222222222", "A1", "888@g.us", "5211111111111"]
    ):
        repository.requests.append(
            AccessRequest(
                sender_id=sender_id,
                sender_kind="group" if sender_id.endswith("@g.us") else "user",
                requested_at=clock.now.replace(minute=minutes),
            )
        )
    authorization_registry.authorize("5212222222222", "user", actor="PANEL_WEB")
    admin_registry.add("A1", "Uno", "user", actor="PANEL_WEB")

    pending = authorization_registry.list_pending_requests()

    assert [r.sender_id for r in pending.users] == ["5211111111111"]
    assert pending.users[0].requested_at.minute == 4
    assert [r.sender_id for r in pending.groups] == ["888@g.us"]
