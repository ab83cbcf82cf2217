from unittest.mock import MagicMock

import pytest
import redis

from premium_service.services.identify_lock import (
    is_token_locked,
    lock_for_token,
    token_lock_key,
    wait_for_token,
)

TOKEN = "NzkyMDQ1OTk0NjMyNzcxNTg0.X-example.bot-token"


@pytest.fixture
def client():
    return MagicMock(spec=redis.Redis)


def test_lock_key_hides_token():
    key = token_lock_key(TOKEN)
    assert key.startswith("automuteus:token:lock:")
    assert TOKEN not in key
    assert key == token_lock_key(TOKEN)
    assert key != token_lock_key(TOKEN + "x")


def test_lock_for_token_sets_expiring_key(client):
    lock_for_token(client, TOKEN)
    client.set.assert_called_once_with(token_lock_key(TOKEN), "", ex=5)


def test_lock_for_token_custom_ttl(client):
    lock_for_token(client, TOKEN, ttl=30)
    client.set.assert_called_once_with(token_lock_key(TOKEN), "", ex=30)


def test_lock_for_token_logs_redis_errors(client, caplog):
    client.set.side_effect = redis.ConnectionError("refused")

    lock_for_token(client, TOKEN)

    assert "Failed to lock token" in caplog.text


@pytest.mark.parametrize("exists, locked", [(1, True), (0, False)])
def test_is_token_locked(client, exists, locked):
    client.exists.return_value = exists
    assert is_token_locked(client, TOKEN) is locked
    client.exists.assert_called_once_with(token_lock_key(TOKEN))


def test_is_token_locked_treats_errors_as_unlocked(client):
    client.exists.side_effect = redis.TimeoutError("timed out")
    assert is_token_locked(client, TOKEN) is False


def test_wait_for_token_polls_until_released(client):
    client.exists.side_effect = [1, 1, 0]
    sleeps = []

    wait_for_token(client, TOKEN, sleep=sleeps.append)

    assert sleeps == [5, 5]
    assert client.exists.call_count == 3


def test_wait_for_token_returns_immediately_when_unlocked(client):
    client.exists.return_value = 0
    sleeps = []

    wait_for_token(client, TOKEN, poll_interval=0.5, sleep=sleeps.append)

    assert sleeps == []


def test_lock_api_exported_from_services_package(client):
    import premium_service.services as services

    client.exists.return_value = 0
    services.lock_for_token(client, TOKEN)
    assert services.is_token_locked(client, TOKEN) is False
    client.set.assert_called_once_with(token_lock_key(TOKEN), "", ex=5)
