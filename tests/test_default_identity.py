from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy.exc import IntegrityError

from core.db import session_scope
from core.models import BusinessIdentity
from services.application import BusinessIdentityService
from services.domain import DefaultIdentityManager
from shared.exceptions import NotFoundError, ValidationError


def _defaults():
    with session_scope() as session:
        return sorted(
            i.name for i in session.query(BusinessIdentity).filter(BusinessIdentity.is_default.is_(True))
        )


def _set_default(identity_id: str) -> None:
    with session_scope() as session:
        DefaultIdentityManager().set_default(session, identity_id)


def test_set_default_moves_the_flag(make_identity) -> None:
    make_identity("Alpha Traders", is_default=True)
    beta = make_identity("Beta Steel")

    _set_default(beta)

    assert _defaults() == ["Beta Steel"]


def test_set_default_is_idempotent(make_identity) -> None:
    alpha = make_identity("Alpha Traders", is_default=True)

    _set_default(alpha)

    assert _defaults() == ["Alpha Traders"]


def test_inactive_identity_cannot_become_default(make_identity) -> None:
    make_identity("Alpha Traders", is_default=True)
    retired = make_identity("Retired Co", is_active=False)

    with pytest.raises(ValidationError):
        _set_default(retired)

    assert _defaults() == ["Alpha Traders"]


def test_unknown_identity_is_not_found() -> None:
    with pytest.raises(NotFoundError):
        _set_default("missing")


def test_deactivating_the_default_clears_it(make_identity) -> None:
    alpha = make_identity("Alpha Traders", is_default=True)

    with session_scope() as session:
        manager = DefaultIdentityManager()
        manager.deactivate(session, session.get(BusinessIdentity, alpha))

    assert _defaults() == []


def test_database_rejects_a_second_default(make_identity) -> None:
    make_identity("Alpha Traders", is_default=True)

    with pytest.raises(IntegrityError):
        make_identity("Beta Steel", is_default=True)


def test_concurrent_default_flips_leave_exactly_one(make_identity) -> None:
    ids = [make_identity(f"Identity {n:02d}", is_default=(n == 0)) for n in range(8)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(_set_default, ids * 3))

    assert len(_defaults()) == 1


def test_service_create_and_update_route_through_the_manager() -> None:
    service = BusinessIdentityService()

    alpha = service.create({"name": "Alpha Traders", "isDefault": True})
    beta = service.create({"name": "  Beta Steel ", "isDefault": True, "phone": " "})

    assert beta["name"] == "Beta Steel"
    assert beta["phone"] is None
    assert beta["isDefault"] is True
    assert service.get(alpha["id"])["isDefault"] is False

    service.update(alpha["id"], {"isDefault": True})
    assert _defaults() == ["Alpha Traders"]

    updated = service.update(alpha["id"], {"isActive": False})
    assert updated["isDefault"] is False
    assert updated["isActive"] is False
    assert _defaults() == []


def test_service_update_rejects_activation_conflicts() -> None:
    service = BusinessIdentityService()
    alpha = service.create({"name": "Alpha Traders"})

    with pytest.raises(ValidationError):
        service.update(alpha["id"], {"isActive": False, "isDefault": True})

    # Rolled back as a whole
    assert service.get(alpha["id"])["isActive"] is True
