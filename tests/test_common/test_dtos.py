"""Tests for actor, order and payment DTOs."""

import pytest

from src.common.dtos.actor_dtos import ActorDTO
from src.common.dtos.order_dtos import OrderDTO
from src.common.dtos.payment_dtos import (
    PaymentCancelled,
    PaymentFailed,
    PaymentSuccessful,
    parse_gateway_callback,
)


def test_actor_from_api_response_treats_zero_ids_as_missing() -> None:
    actor = ActorDTO.from_api_response(
        {"user_id": 12, "full_name": "Amina Mohammed", "role": "shop_manager", "shop_id": "3", "warehouse_id": 0}
    )

    assert actor.id == "12"
    assert actor.shop_id == 3
    assert actor.warehouse_id is None
    assert actor.is_shop_bound


def test_actor_permissions_fall_back_to_role() -> None:
    assert ActorDTO(id="3", role="warehouse_manager").has_permission("requests.approve")
    assert not ActorDTO(id="4", role="shop_manager").has_permission("requests.approve")
    assert ActorDTO(id="5", role="custom", permissions=["*"]).has_permission("requests.approve")


@pytest.mark.parametrize("role", ["tenant_admin", "admin", "super_admin", "shop_manager"])
def test_only_warehouse_managers_approve_by_role_fallback(role) -> None:
    assert not ActorDTO(id="2", role=role).has_permission("requests.approve")
    assert ActorDTO(id="2", role=role, permissions=["requests.approve"]).has_permission("requests.approve")


@pytest.mark.parametrize(
    "response, expected",
    [
        ({"status": "successful", "transaction_id": 4711}, PaymentSuccessful(transaction_id="4711")),
        ({"status": "SUCCESSFUL", "transaction_id": "9"}, PaymentSuccessful(transaction_id="9")),
        ({"status": "cancelled"}, PaymentCancelled()),
        ({"status": "failed"}, PaymentFailed(reason="failed")),
        ({}, PaymentFailed(reason="unknown")),
    ],
)
def test_parse_gateway_callback(response, expected) -> None:
    assert parse_gateway_callback(response) == expected


def test_order_dto_falls_back_to_id() -> None:
    order = OrderDTO.from_api_response({"id": "42", "order_number": "ORD-20240115-0042"})

    assert order.order_id == 42
    assert order.order_number == "ORD-20240115-0042"
