"""Unit tests for the file access decision rule."""

import uuid

import pytest

from projectninjas.kernel.permissions.authorization_gate import is_entitled

OWNER = uuid.uuid4()
OTHER = uuid.uuid4()


@pytest.mark.parametrize(
    "requester, status, expected",
    [
        (OWNER, None, True),
        (OWNER, "pending", True),
        (OWNER, "approved", True),
        (OWNER, "denied", True),
        (OTHER, None, False),
        (OTHER, "pending", False),
        (OTHER, "approved", True),
        (OTHER, "denied", False),
    ],
)
def test_is_entitled(requester, status, expected):
    assert is_entitled(OWNER, requester, status) is expected
