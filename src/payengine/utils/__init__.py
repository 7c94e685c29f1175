"""Utility functions for payengine."""

from payengine.utils.amount_parser import parse_amount, quantize_amount, checked_amount

__all__ = ["parse_amount", "quantize_amount", "checked_amount"]
