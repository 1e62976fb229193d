#!/usr/bin/env python3
"""Conflict detection thresholds

Severity cut-offs and limits used by the campaign conflict engine.
Injected into the detectors so every threshold can be tuned per
deployment and overridden in tests.
"""
import os
from dataclasses import dataclass, field
from typing import Dict, List

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default

def _float(val: str, default: float) -> float:
    try:
        return float(val) if val else default
    except ValueError:
        return default


def _default_prerequisites() -> Dict[str, List[str]]:
    return {
        "retention": ["acquisition", "awareness"],
        "upsell": ["acquisition", "awareness"],
    }


def _parse_prerequisites(raw: str) -> Dict[str, List[str]]:
    """Parse ``retention=acquisition|awareness;upsell=acquisition`` pairs"""
    mapping: Dict[str, List[str]] = {}
    for entry in raw.split(";"):
        if "=" not in entry:
            continue
        follow_up, prerequisites = entry.split("=", 1)
        types = [t.strip() for t in prerequisites.split("|") if t.strip()]
        if follow_up.strip() and types:
            mapping[follow_up.strip()] = types
    return mapping


@dataclass
class ConflictConfig:
    """Thresholds for conflict classification"""

    # Schedule: overlap days above these values raise the baseline severity
    schedule_high_days: int = 14
    schedule_medium_days: int = 7

    # Audience: overlap score above these values produces a conflict
    audience_conflict_threshold: float = 0.7
    audience_high_threshold: float = 0.9

    # Product: share of candidate products already promoted elsewhere (%)
    product_high_percentage: float = 75.0
    product_medium_percentage: float = 50.0

    # Concurrency heuristics
    budget_max_concurrent: int = 3
    channel_max_same_type: int = 2

    # Collaborator I/O bound
    store_timeout_seconds: float = 10.0

    # Follow-up campaign type -> types expected to run before it
    sequence_prerequisites: Dict[str, List[str]] = field(default_factory=_default_prerequisites)

    @classmethod
    def from_env(cls) -> 'ConflictConfig':
        """Load thresholds from CONFLICT_* environment variables"""
        raw_prerequisites = os.getenv("CONFLICT_SEQUENCE_PREREQUISITES", "")
        return cls(
            schedule_high_days=_int(os.getenv("CONFLICT_SCHEDULE_HIGH_DAYS", "14"), 14),
            schedule_medium_days=_int(os.getenv("CONFLICT_SCHEDULE_MEDIUM_DAYS", "7"), 7),
            audience_conflict_threshold=_float(os.getenv("CONFLICT_AUDIENCE_THRESHOLD", "0.7"), 0.7),
            audience_high_threshold=_float(os.getenv("CONFLICT_AUDIENCE_HIGH_THRESHOLD", "0.9"), 0.9),
            product_high_percentage=_float(os.getenv("CONFLICT_PRODUCT_HIGH_PCT", "75"), 75.0),
            product_medium_percentage=_float(os.getenv("CONFLICT_PRODUCT_MEDIUM_PCT", "50"), 50.0),
            budget_max_concurrent=_int(os.getenv("CONFLICT_BUDGET_MAX_CONCURRENT", "3"), 3),
            channel_max_same_type=_int(os.getenv("CONFLICT_CHANNEL_MAX_SAME_TYPE", "2"), 2),
            store_timeout_seconds=_float(os.getenv("CONFLICT_STORE_TIMEOUT", "10"), 10.0),
            sequence_prerequisites=(
                _parse_prerequisites(raw_prerequisites)
                if raw_prerequisites
                else _default_prerequisites()
            ),
        )
