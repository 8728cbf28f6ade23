"""Pytest configuration and fixtures for Mi AC Companion tests."""

from unittest.mock import AsyncMock, Mock

import pytest

from custom_components.mi_ac_companion.api import AirConditionerCompanionClient
from custom_components.mi_ac_companion.models import (
    CompanionDeviceState,
    OperationMode,
    Power,
    RotationSpeed,
)

TEST_HOST = "192.168.1.50"
TEST_TOKEN = "0123456789abcdef0123456789abcdef"


@pytest.fixture
def mock_hass() -> Mock:
    """Create a mock Home Assistant instance.

    Executor jobs run inline so transport calls stay synchronous in tests.
    """
    hass = Mock()
    hass.data = {}
    hass.async_add_executor_job = AsyncMock(
        side_effect=lambda func, *args: func(*args)
    )
    return hass


@pytest.fixture
def cooling_state() -> CompanionDeviceState:
    """Fixture providing a running unit cooling at 24 degrees."""
    return CompanionDeviceState(
        operation_mode=OperationMode.COOLING,
        power=Power.ON,
        swing_mode=Power.OFF,
        rotation_speed=RotationSpeed.NORMAL,
        temperature=24,
    )


@pytest.fixture
def off_state() -> CompanionDeviceState:
    """Fixture providing a unit that is switched off."""
    return CompanionDeviceState(
        operation_mode=OperationMode.COOLING,
        power=Power.OFF,
        swing_mode=Power.OFF,
        rotation_speed=RotationSpeed.FAST,
        temperature=20,
    )


@pytest.fixture
def mock_client() -> Mock:
    """Create a mock companion client with every command mocked."""
    client = Mock(spec=AirConditionerCompanionClient)
    client.host = TEST_HOST
    client.async_poll_status = AsyncMock()
    client.async_set_power = AsyncMock()
    client.async_set_rotation_speed = AsyncMock()
    client.async_set_swing = AsyncMock()
    client.async_set_target_temperature = AsyncMock()
    client.async_set_operation_mode = AsyncMock()
    client.async_start_ir_learn = AsyncMock()
    client.async_read_ir_learn_result = AsyncMock()
    client.async_stop_ir_learn = AsyncMock()
    client.async_send_ir_code = AsyncMock()
    return client
