"""Exceptions raised by the Mi AC Companion integration."""


class CompanionError(Exception):
    """Base exception for Mi AC Companion errors."""


class CompanionTransportError(CompanionError):
    """Exception raised when a round trip to the device fails."""


class CompanionCommandError(CompanionTransportError):
    """Exception raised when the device does not acknowledge a command."""


class CompanionTimeoutError(CompanionTransportError):
    """Exception raised when the device does not answer in time."""


class CompanionDecodeError(CompanionError):
    """Base exception for malformed device responses."""


class InvalidEnumValueError(CompanionDecodeError):
    """Exception raised for a device code outside its enumeration."""


class UnknownStatusKeyError(CompanionDecodeError):
    """Exception raised for an unknown key letter in a status token."""


class MissingStatusFieldError(CompanionDecodeError):
    """Exception raised when a status token lacks a required field."""


class MalformedStatusError(CompanionDecodeError):
    """Exception raised when a status token or property list cannot be read."""


class IRLearnStateError(CompanionError):
    """Exception raised for an infrared learn call made in the wrong state."""
