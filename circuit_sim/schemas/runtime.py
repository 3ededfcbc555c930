from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SwitchStateSource(str, Enum):
    PLC = "plc"
    BUTTON = "button"
    RELAY = "relay"
    MANUAL = "manual"


class SwitchState(BaseModel):
    component_id: str
    is_open: bool  # True = no current flow
    state_source: SwitchStateSource
    is_normally_open: bool
    is_energized: bool  # raw value before NO/NC logic


class SwitchStateMap(BaseModel):
    states: dict[str, SwitchState] = Field(default_factory=dict)


class RuntimeState(BaseModel):
    """Live inputs supplied by the PLC link and UI handlers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    plc_outputs: dict[int, bool] = Field(default_factory=dict)  # coil address → ON/OFF
    button_states: dict[str, bool] = Field(default_factory=dict)  # componentId → pressed
    manual_overrides: dict[str, bool] = Field(default_factory=dict)  # componentId → forced
