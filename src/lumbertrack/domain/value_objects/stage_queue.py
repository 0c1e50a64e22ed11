"""Operational queues a load can appear in."""

from enum import StrEnum


class StageQueue(StrEnum):
    """Named operational views derived from load, item and pack state."""

    TALLY_ENTRY = "tally_entry"
    RIP_ENTRY = "rip_entry"
    INVENTORY = "inventory"
    PO_NEEDED = "po_needed"
    PAID = "paid"
