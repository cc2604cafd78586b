"""Testing utilities for EcoStore."""

from .factory import IdentityFactory, ItemFactory
from .fixtures import json_economy, json_economy_at

__all__ = [
    "IdentityFactory",
    "ItemFactory",
    "json_economy",
    "json_economy_at",
]
