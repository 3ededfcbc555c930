"""PLC address helpers — formatting and parsing of memory addresses."""

from __future__ import annotations

import math
import re
from enum import Enum


class PlcAddressType(str, Enum):
    COIL = "coil"
    DISCRETE = "discrete"
    HOLDING = "holding"
    INPUT = "input"


ADDRESS_PREFIXES: dict[PlcAddressType, str] = {
    PlcAddressType.COIL: "M",
    PlcAddressType.DISCRETE: "X",
    PlcAddressType.HOLDING: "D",
    PlcAddressType.INPUT: "IR",
}

MIN_ADDRESS = 0
MAX_ADDRESS = 9999

_DIGITS = re.compile(r"[0-9]+")
_NON_DIGITS = re.compile(r"[^0-9]")


def clamp_address(address: float) -> int:
    return max(MIN_ADDRESS, min(MAX_ADDRESS, math.floor(address)))


def is_valid_address(address: object) -> bool:
    return (
        isinstance(address, int)
        and not isinstance(address, bool)
        and MIN_ADDRESS <= address <= MAX_ADDRESS
    )


def format_plc_address(address: float, address_type: PlcAddressType) -> str:
    """Format e.g. (1, COIL) → "M0001". Out-of-range values are clamped."""
    prefix = ADDRESS_PREFIXES[address_type]
    return f"{prefix}{clamp_address(address):04d}"


def parse_plc_address(text: str) -> tuple[PlcAddressType, int] | None:
    """Parse a formatted address such as "X0042". None when invalid."""
    normalized = text.strip().upper()

    for address_type, prefix in ADDRESS_PREFIXES.items():
        if not normalized.startswith(prefix):
            continue
        number = normalized[len(prefix):]
        if _DIGITS.fullmatch(number):
            address = int(number)
            if MIN_ADDRESS <= address <= MAX_ADDRESS:
                return address_type, address
    return None


def parse_coil_address(address: str | int | None) -> int:
    """Resolve a plc_out block address to a coil number.

    Integers pass through. Strings keep only their digits, so "Y:16"
    gives 16 and "C:0x0001" gives 1. No digits at all gives 0.
    """
    if address is None:
        return 0
    if isinstance(address, int):
        return address
    digits = _NON_DIGITS.sub("", address)
    return int(digits) if digits else 0
