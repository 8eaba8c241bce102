from enum import StrEnum


class SlotStatus(StrEnum):
    FREE = 'free'
    HELD = 'held'
    BOOKED = 'booked'
