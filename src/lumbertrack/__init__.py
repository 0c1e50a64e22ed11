"""Lumber load processing pipeline: loads, packs, splits and stage queues."""

__version__ = "0.1.0"
