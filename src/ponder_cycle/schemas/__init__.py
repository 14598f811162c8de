"""Pydantic schemas for the Ponder cycle API."""

from .cycle import DeadlineOut, PhaseOut, PromptWindowOut, TriggerDecisionOut

__all__ = ["PhaseOut", "PromptWindowOut", "DeadlineOut", "TriggerDecisionOut"]
