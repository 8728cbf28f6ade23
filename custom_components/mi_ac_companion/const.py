"""Constants for Mi AC Companion integration.

This module contains all the constants used throughout the integration,
including miIO method names, property names, configuration keys and the
code tables of the device status token.
"""

from .models import OperationMode, Power, RotationSpeed

DOMAIN = "mi_ac_companion"

MANUFACTURER = "Xiaomi"
MODEL = "Air Conditioner Companion"

DEFAULT_NAME = "Air Conditioner"
DEFAULT_POLL_INTERVAL = 3  # Seconds between status polls
DEFAULT_TIMEOUT = 5  # Seconds per miIO round trip, retried by python-miio

DATA_TRANSPORT = "transport"

ERROR_CANNOT_CONNECT = "cannot_connect"
ERROR_INVALID_TOKEN = "invalid_token"
ERROR_INVALID_RESPONSE = "invalid_response"
ERROR_UNKNOWN = "unknown_error"

TOKEN_LENGTH = 32

MIN_TEMPERATURE = 16
MAX_TEMPERATURE = 30
TEMPERATURE_STEP = 1

IR_DEFAULT_FREQUENCY = 38400
IR_LEARN_TIMEOUT = 30  # Seconds
IR_LEARN_INTERVAL = 1  # Seconds between learn result reads

# miIO methods
METHOD_GET_PROP = "get_prop"
METHOD_SET_POWER = "set_power"
METHOD_SET_FAN_LEVEL = "set_fan_level"
METHOD_SET_SWING = "set_ver_swing"
METHOD_SET_TARGET_TEMPERATURE = "set_tar_temp"
METHOD_SET_MODE = "set_mode"
METHOD_IR_LEARN = "miIO.ir_learn"
METHOD_IR_READ = "miIO.ir_read"
METHOD_IR_LEARN_STOP = "miIO.ir_learn_stop"
METHOD_IR_PLAY = "miIO.ir_play"

# Device properties
PROP_AC_MODE = "ac_mode"
PROP_AC_STATE = "ac_state"
PROP_LOAD_POWER = "load_power"
PROP_INDICATOR_LIGHT = "en_nnlight"
PROP_QUICK_COOL_STATE = "quick_cool_state"
PROP_SLEEP_STATE = "sleep_state"
PROP_LIST_CRC32 = "list_crc32"

DEFAULT_PROPERTIES = [
    PROP_AC_MODE,
    PROP_AC_STATE,
    PROP_LOAD_POWER,
    PROP_INDICATOR_LIGHT,
    PROP_QUICK_COOL_STATE,
    PROP_SLEEP_STATE,
    PROP_LIST_CRC32,
]

# Status token
STATUS_SEPARATOR = "_"
STATUS_KEY_POWER = "P"
STATUS_KEY_MODE = "M"
STATUS_KEY_TEMPERATURE = "T"
STATUS_KEY_ROTATION_SPEED = "S"
STATUS_KEY_SWING = "D"

MODE_MAP = {
    0: OperationMode.COOLING,
    1: OperationMode.HEATING,
    2: OperationMode.AUTO,
    3: OperationMode.SCAVENGER,
    4: OperationMode.DEHUMIDIFICATION,
}
MODE_REVERSE_MAP = {value: key for key, value in MODE_MAP.items()}
ROTATION_SPEED_MAP = {
    0: RotationSpeed.AUTO,
    1: RotationSpeed.SLOW,
    2: RotationSpeed.NORMAL,
    3: RotationSpeed.FAST,
}
ROTATION_SPEED_REVERSE_MAP = {value: key for key, value in ROTATION_SPEED_MAP.items()}
# 0 means on: the device reports the inverse of the usual convention
POWER_MAP = {
    0: Power.ON,
    1: Power.OFF,
}
POWER_REVERSE_MAP = {value: key for key, value in POWER_MAP.items()}
SWING_ON_CODE = 0
SWING_OFF_CODE = 999

# Fan target states
FAN_STATE_MANUAL = "manual"
FAN_STATE_AUTO = "auto"

# Services
SERVICE_LEARN_IR_CODE = "learn_ir_code"
SERVICE_SEND_IR_CODE = "send_ir_code"
ATTR_ENTRY_ID = "entry_id"
ATTR_CODE = "code"
ATTR_FREQUENCY = "frequency"
ATTR_TIMEOUT = "timeout"
