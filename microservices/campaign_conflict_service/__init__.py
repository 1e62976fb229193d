"""
Campaign Conflict Service

Conflict detection and dependency validation for marketing campaigns:
- Schedule, audience, product, budget and channel conflict detection
- Severity classification with same-type escalation
- Execution-order validation against dependency and exclusivity records
- Validation outcome monitoring over NATS

Library component; no network-facing API of its own.
"""

__version__ = "1.0.0"
__service__ = "campaign_conflict_service"
