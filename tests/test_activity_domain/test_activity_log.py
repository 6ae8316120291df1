"""Tests for the activity log implementations."""

import threading
from unittest.mock import Mock

import requests

from src.activity_domain.infrastructure.api_clients.activity_log_api_client import ActivityLogApiClient
from src.activity_domain.infrastructure.persistence.in_memory_activity_log import InMemoryActivityLog
from src.common.config.settings import settings


def test_in_memory_log_newest_first(shop_manager) -> None:
    log = InMemoryActivityLog()

    log.log(shop_manager, "stock_request_created", "shops", {"requestId": "r1"})
    log.log(shop_manager, "sale_completed", "pos", {"total": 995.68})

    entries = log.entries()
    assert [e.action for e in entries] == ["sale_completed", "stock_request_created"]
    assert entries[0].actor_id == "4"
    assert entries[0].actor_name == "Shop Manager"
    assert entries[0].timestamp.tzinfo is not None
    assert [e.action for e in log.entries(module="shops")] == ["stock_request_created"]


def test_in_memory_log_is_capped(shop_manager) -> None:
    log = InMemoryActivityLog(max_entries=3)

    for i in range(5):
        log.log(shop_manager, f"action_{i}", "pos")

    assert [e.action for e in log.entries()] == ["action_4", "action_3", "action_2"]


def test_api_client_posts_entry(mocker, warehouse_manager) -> None:
    mocker.patch.object(settings, "ACTIVITY_LOG_API_BASE_URL", "https://api.example.com")
    client = ActivityLogApiClient()
    client.session.post = Mock(return_value=Mock())

    client.log(warehouse_manager, "stock_request_approved", "shops", {"requestId": "r1", "quantity": 60})
    client.close()

    call = client.session.post.call_args
    assert call.args[0] == "https://api.example.com/activity-logs"
    payload = call.kwargs["json"]
    assert payload["user_id"] == "3"
    assert payload["action"] == "stock_request_approved"
    assert payload["details"] == {"requestId": "r1", "quantity": 60}
    assert call.kwargs["headers"]["Authorization"] == "Bearer test_token"
    assert call.kwargs["timeout"] == 5


def test_api_client_swallows_transport_errors(mocker, warehouse_manager) -> None:
    mocker.patch.object(settings, "ACTIVITY_LOG_API_BASE_URL", "https://api.example.com")
    client = ActivityLogApiClient()
    client.session.post = Mock(side_effect=requests.exceptions.ConnectionError("Connection refused"))

    client.log(warehouse_manager, "stock_request_approved", "shops")
    client.close()

    client.session.post.assert_called_once()


def test_api_client_without_base_url_does_not_post(warehouse_manager) -> None:
    client = ActivityLogApiClient()
    client.session.post = Mock()

    client.log(warehouse_manager, "stock_request_approved", "shops")

    client.session.post.assert_not_called()


def test_api_client_does_not_block_the_caller(mocker, warehouse_manager) -> None:
    mocker.patch.object(settings, "ACTIVITY_LOG_API_BASE_URL", "https://api.example.com")
    client = ActivityLogApiClient()
    backend_responds = threading.Event()
    client.session.post = Mock(side_effect=lambda *args, **kwargs: backend_responds.wait(5) and Mock())

    client.log(warehouse_manager, "sale_completed", "pos", {"total": 995.68})

    assert not backend_responds.is_set()
    backend_responds.set()
    client.close()
    client.session.post.assert_called_once()


def test_api_client_drops_entries_after_close(mocker, warehouse_manager) -> None:
    mocker.patch.object(settings, "ACTIVITY_LOG_API_BASE_URL", "https://api.example.com")
    client = ActivityLogApiClient()
    client.session.post = Mock(return_value=Mock())
    client.close()

    client.log(warehouse_manager, "sale_completed", "pos")

    client.session.post.assert_not_called()
