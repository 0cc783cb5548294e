"""Investing Layer - submits the strategy's decisions to the marketplace."""

from autolend.investing.investor import Investor, OperatingMode

__all__ = ["Investor", "OperatingMode"]
