from __future__ import annotations

from datetime import datetime

import pytest

from tests.fakes import FakeStore, InMemoryAttendance, InMemoryMembers, make_member


@pytest.fixture
def fixed_now():
    # A Sunday.
    return datetime(2025, 10, 12, 9, 30, 0)


@pytest.fixture
def members_repo():
    return InMemoryMembers(
        [
            make_member("awa", "Awa", "Diallo", role_tag="Chantre", ministry="Louange"),
            make_member("jean", "Jean", "Kouassi", role_tag="Diacre", ministry="Accueil"),
            make_member("jp", "Jean-Paul", "Mbemba", role_tag="Ancien", ministry="Louange"),
            make_member("esther", "Esther", "Ngoma"),
        ]
    )


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def store():
    return FakeStore()
