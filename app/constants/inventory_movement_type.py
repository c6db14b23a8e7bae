# app/constants/inventory_movement_type.py

from enum import Enum


class MovementType(str, Enum):
    ENTRY = "entry"
    EXIT = "exit"
    TRANSFER = "transfer"
    ADJUSTMENT = "adjustment"
