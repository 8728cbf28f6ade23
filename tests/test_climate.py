"""Tests for the Mi AC Companion climate entity."""

from unittest.mock import AsyncMock, Mock

import pytest
from homeassistant.components.climate import (
    ClimateEntityFeature,
    HVACAction,
    HVACMode,
)
from homeassistant.const import ATTR_TEMPERATURE, UnitOfTemperature
from homeassistant.exceptions import HomeAssistantError

from custom_components.mi_ac_companion import reconciler
from custom_components.mi_ac_companion.climate import (
    CompanionClimateEntity,
    async_setup_entry,
)
from custom_components.mi_ac_companion.exceptions import CompanionTransportError
from custom_components.mi_ac_companion.models import (
    DEFAULT_STATE,
    CompanionDeviceState,
    OperationMode,
)
from custom_components.mi_ac_companion.reconciler import Characteristic, Service

UNIQUE_ID = "192.168.1.50"
DEVICE_NAME = "Living room"


@pytest.fixture
def mock_coordinator(cooling_state: CompanionDeviceState) -> Mock:
    """Create a mock coordinator holding a cooling state."""
    coordinator = Mock()
    coordinator.data = cooling_state
    coordinator.async_add_listener = Mock(return_value=Mock())
    coordinator.has_update_for = Mock(return_value=True)
    coordinator.async_set_hvac_mode = AsyncMock()
    coordinator.async_set_target_temperature = AsyncMock()
    coordinator.async_set_active = AsyncMock()
    return coordinator


@pytest.fixture
def entity(mock_coordinator: Mock) -> CompanionClimateEntity:
    """Create a climate entity for testing."""
    climate = CompanionClimateEntity(mock_coordinator, UNIQUE_ID, DEVICE_NAME)
    climate.async_write_ha_state = Mock()
    return climate


class TestAsyncSetupEntry:
    """Tests for async_setup_entry function."""

    @pytest.mark.asyncio
    async def test_async_setup_entry_adds_one_entity(
        self, mock_hass: Mock, mock_coordinator: Mock
    ) -> None:
        """Test that one climate entity is created per companion."""
        entry = Mock()
        entry.entry_id = "test_entry"
        mock_hass.data["mi_ac_companion"] = {
            "test_entry": {
                "coordinator": mock_coordinator,
                "unique_id": UNIQUE_ID,
                "name": DEVICE_NAME,
            },
        }
        async_add_entities = Mock()
        await async_setup_entry(mock_hass, entry, async_add_entities)
        async_add_entities.assert_called_once()
        entities = async_add_entities.call_args[0][0]
        assert len(entities) == 1
        assert isinstance(entities[0], CompanionClimateEntity)


class TestCompanionClimateEntityInit:
    """Tests for CompanionClimateEntity initialization."""

    def test_init_sets_attributes(self, entity: CompanionClimateEntity) -> None:
        """Test the static attributes of the thermostat."""
        assert entity.unique_id == f"{UNIQUE_ID}_thermostat"
        assert entity.hvac_modes == [HVACMode.OFF, HVACMode.COOL, HVACMode.AUTO]
        assert entity.temperature_unit == UnitOfTemperature.CELSIUS
        assert entity.min_temp == 16
        assert entity.max_temp == 30
        assert entity.target_temperature_step == 1
        assert entity.supported_features & ClimateEntityFeature.TARGET_TEMPERATURE
        assert entity.device_info["name"] == DEVICE_NAME


class TestCompanionClimateEntityState:
    """Tests for the mapped state properties."""

    def test_state_reflects_cached_device_state(
        self, entity: CompanionClimateEntity
    ) -> None:
        """Test the mapped values of a cooling unit."""
        assert entity.hvac_mode == HVACMode.COOL
        assert entity.hvac_action == HVACAction.COOLING
        assert entity.current_temperature == 24
        assert entity.target_temperature == 24

    def test_dry_mode_reads_auto_target_and_cooling_action(
        self,
        entity: CompanionClimateEntity,
        mock_coordinator: Mock,
        cooling_state: CompanionDeviceState,
    ) -> None:
        """Test that the current and target mappings diverge for dry mode."""
        mock_coordinator.data = cooling_state.replace(
            operation_mode=OperationMode.DEHUMIDIFICATION
        )
        assert entity.hvac_mode == HVACMode.AUTO
        assert entity.hvac_action == HVACAction.COOLING

    def test_off_unit(
        self,
        entity: CompanionClimateEntity,
        mock_coordinator: Mock,
        off_state: CompanionDeviceState,
    ) -> None:
        """Test that an off unit reads OFF."""
        mock_coordinator.data = off_state
        assert entity.hvac_mode == HVACMode.OFF
        assert entity.hvac_action == HVACAction.OFF

    def test_state_matches_pushed_values(
        self, entity: CompanionClimateEntity, cooling_state: CompanionDeviceState
    ) -> None:
        """Test that the entity reads the values the coordinator pushes."""
        (update,) = [
            update
            for update in reconciler.service_updates(DEFAULT_STATE, cooling_state)
            if update.service is Service.THERMOSTAT
        ]
        assert update.values == {
            Characteristic.CURRENT_HEATING_COOLING_STATE: entity.hvac_action,
            Characteristic.TARGET_HEATING_COOLING_STATE: entity.hvac_mode,
            Characteristic.CURRENT_TEMPERATURE: entity.current_temperature,
            Characteristic.TARGET_TEMPERATURE: entity.target_temperature,
        }


class TestCompanionClimateEntityCoordinatorUpdate:
    """Tests for coordinator update handling."""

    @pytest.mark.asyncio
    async def test_added_to_hass_subscribes(
        self, entity: CompanionClimateEntity, mock_coordinator: Mock
    ) -> None:
        """Test that the entity listens to the coordinator and unsubscribes."""
        await entity.async_added_to_hass()
        mock_coordinator.async_add_listener.assert_called_once_with(
            entity._handle_coordinator_update
        )
        unsub = mock_coordinator.async_add_listener.return_value
        await entity.async_will_remove_from_hass()
        unsub.assert_called_once()

    def test_writes_state_for_thermostat_update(
        self, entity: CompanionClimateEntity, mock_coordinator: Mock
    ) -> None:
        """Test that a thermostat update writes the state."""
        entity._handle_coordinator_update()
        mock_coordinator.has_update_for.assert_called_once_with(Service.THERMOSTAT)
        entity.async_write_ha_state.assert_called_once()

    def test_skips_write_without_thermostat_update(
        self, entity: CompanionClimateEntity, mock_coordinator: Mock
    ) -> None:
        """Test that fan-only updates do not write the thermostat."""
        mock_coordinator.has_update_for.return_value = False
        entity._handle_coordinator_update()
        entity.async_write_ha_state.assert_not_called()


class TestCompanionClimateEntityCommands:
    """Tests for the climate service methods."""

    @pytest.mark.asyncio
    async def test_async_set_hvac_mode(
        self, entity: CompanionClimateEntity, mock_coordinator: Mock
    ) -> None:
        """Test that the mode is forwarded to the coordinator."""
        await entity.async_set_hvac_mode(HVACMode.AUTO)
        mock_coordinator.async_set_hvac_mode.assert_called_once_with(HVACMode.AUTO)

    @pytest.mark.asyncio
    async def test_async_set_hvac_mode_surfaces_errors(
        self, entity: CompanionClimateEntity, mock_coordinator: Mock
    ) -> None:
        """Test that device errors reach the caller as HomeAssistantError."""
        mock_coordinator.async_set_hvac_mode.side_effect = CompanionTransportError(
            "down"
        )
        with pytest.raises(HomeAssistantError, match="down"):
            await entity.async_set_hvac_mode(HVACMode.COOL)

    @pytest.mark.asyncio
    async def test_async_set_temperature(
        self, entity: CompanionClimateEntity, mock_coordinator: Mock
    ) -> None:
        """Test that the temperature is forwarded to the coordinator."""
        await entity.async_set_temperature(**{ATTR_TEMPERATURE: 22.0})
        mock_coordinator.async_set_target_temperature.assert_called_once_with(22.0)

    @pytest.mark.asyncio
    async def test_async_set_temperature_without_value(
        self, entity: CompanionClimateEntity, mock_coordinator: Mock
    ) -> None:
        """Test that a call without temperature does nothing."""
        await entity.async_set_temperature()
        mock_coordinator.async_set_target_temperature.assert_not_called()

    @pytest.mark.asyncio
    async def test_turn_on_and_off(
        self, entity: CompanionClimateEntity, mock_coordinator: Mock
    ) -> None:
        """Test that turn on activates and turn off sets OFF."""
        await entity.async_turn_on()
        mock_coordinator.async_set_active.assert_called_once_with(True)
        await entity.async_turn_off()
        mock_coordinator.async_set_hvac_mode.assert_called_once_with(HVACMode.OFF)
