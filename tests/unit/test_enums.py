"""Tests for ct_common.enums."""

from src.ct_common.enums import OrderStatus, Role


class TestRole:
    def test_values_match_db_check_constraint(self) -> None:
        assert {r.value for r in Role} == {"member", "admin"}

    def test_admin_satisfies_member(self) -> None:
        assert Role.ADMIN.satisfies(Role.MEMBER)
        assert Role.ADMIN.satisfies(Role.ADMIN)

    def test_member_does_not_satisfy_admin(self) -> None:
        assert not Role.MEMBER.satisfies(Role.ADMIN)
        assert Role.MEMBER.satisfies(Role.MEMBER)


def test_order_status_values() -> None:
    assert {s.value for s in OrderStatus} == {"PENDING", "PAID", "CANCELLED"}
