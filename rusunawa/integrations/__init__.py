"""
Integrations with the rusunawa REST backend.
"""

from rusunawa.integrations.base import BookingBackend
from rusunawa.integrations.rusunawa_api import RusunawaApiClient

__all__ = ["BookingBackend", "RusunawaApiClient"]
