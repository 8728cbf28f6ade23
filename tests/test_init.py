"""Tests for Mi AC Companion integration setup and unload."""

from unittest.mock import AsyncMock, Mock, patch

import pytest
from homeassistant.const import CONF_HOST, CONF_NAME, CONF_TOKEN

from custom_components.mi_ac_companion import (
    PLATFORMS,
    async_setup_entry,
    async_unload_entry,
    get_transport,
)
from custom_components.mi_ac_companion.api import IRLearnSession, MiioTransport
from custom_components.mi_ac_companion.const import DOMAIN

from .conftest import TEST_HOST, TEST_TOKEN

COORDINATOR_PATH = "custom_components.mi_ac_companion.CompanionCoordinator"


@pytest.fixture
def config_entry() -> Mock:
    """Create a mock config entry for a companion."""
    entry = Mock()
    entry.entry_id = "test_entry"
    entry.unique_id = TEST_HOST
    entry.data = {CONF_HOST: TEST_HOST, CONF_TOKEN: TEST_TOKEN, CONF_NAME: "Study"}
    return entry


@pytest.fixture
def setup_hass(mock_hass: Mock) -> Mock:
    """Create a mock hass whose platform forwarding succeeds."""
    mock_hass.config_entries.async_forward_entry_setups = AsyncMock()
    mock_hass.config_entries.async_unload_platforms = AsyncMock(return_value=True)
    return mock_hass


@pytest.fixture
def mock_coordinator() -> Mock:
    """Create a mock coordinator."""
    coordinator = Mock()
    coordinator.async_config_entry_first_refresh = AsyncMock()
    coordinator.async_shutdown = AsyncMock()
    return coordinator


class TestGetTransport:
    """Tests for get_transport function."""

    def test_get_transport_is_shared(self, mock_hass: Mock) -> None:
        """Test that one transport serves every companion."""
        transport = get_transport(mock_hass)
        assert isinstance(transport, MiioTransport)
        assert get_transport(mock_hass) is transport


class TestAsyncSetupEntry:
    """Tests for async_setup_entry function."""

    @pytest.mark.asyncio
    async def test_async_setup_entry_stores_entry_data(
        self, setup_hass: Mock, config_entry: Mock, mock_coordinator: Mock
    ) -> None:
        """Test that setup refreshes once and stores the runtime objects."""
        with patch(COORDINATOR_PATH, return_value=mock_coordinator):
            assert await async_setup_entry(setup_hass, config_entry) is True

        mock_coordinator.async_config_entry_first_refresh.assert_called_once()
        entry_data = setup_hass.data[DOMAIN]["test_entry"]
        assert entry_data["coordinator"] is mock_coordinator
        assert entry_data["client"].host == TEST_HOST
        assert isinstance(entry_data["ir_session"], IRLearnSession)
        assert entry_data["ir_session"].task_id == "test_entry"
        assert entry_data["unique_id"] == TEST_HOST
        assert entry_data["name"] == "Study"
        setup_hass.config_entries.async_forward_entry_setups.assert_called_once_with(
            config_entry, PLATFORMS
        )

    @pytest.mark.asyncio
    async def test_async_setup_entry_fails_without_token(
        self, setup_hass: Mock, config_entry: Mock
    ) -> None:
        """Test that an entry without a token does not set up."""
        config_entry.data = {CONF_HOST: TEST_HOST}
        assert await async_setup_entry(setup_hass, config_entry) is False

    @pytest.mark.asyncio
    async def test_async_setup_entry_fails_when_forwarding_fails(
        self, setup_hass: Mock, config_entry: Mock, mock_coordinator: Mock
    ) -> None:
        """Test that a platform error fails the setup."""
        setup_hass.config_entries.async_forward_entry_setups.side_effect = (
            RuntimeError("platform")
        )
        with patch(COORDINATOR_PATH, return_value=mock_coordinator):
            assert await async_setup_entry(setup_hass, config_entry) is False


class TestAsyncUnloadEntry:
    """Tests for async_unload_entry function."""

    @pytest.mark.asyncio
    async def test_async_unload_entry_cleans_up(
        self, setup_hass: Mock, config_entry: Mock, mock_coordinator: Mock
    ) -> None:
        """Test that unload drops the entry data and stops the coordinator."""
        with patch(COORDINATOR_PATH, return_value=mock_coordinator):
            await async_setup_entry(setup_hass, config_entry)

        assert await async_unload_entry(setup_hass, config_entry) is True
        assert "test_entry" not in setup_hass.data[DOMAIN]
        mock_coordinator.async_shutdown.assert_called_once()

    @pytest.mark.asyncio
    async def test_async_unload_entry_keeps_data_when_platforms_fail(
        self, setup_hass: Mock, config_entry: Mock, mock_coordinator: Mock
    ) -> None:
        """Test that a failed platform unload keeps the entry data."""
        with patch(COORDINATOR_PATH, return_value=mock_coordinator):
            await async_setup_entry(setup_hass, config_entry)
        setup_hass.config_entries.async_unload_platforms.return_value = False

        assert await async_unload_entry(setup_hass, config_entry) is False
        assert "test_entry" in setup_hass.data[DOMAIN]
