"""
Campaign Conflict Service Data Repository

Data access layer - PostgreSQL (Async). Rows are mapped into models at
this boundary; anything that does not parse is rejected with
MalformedRecordError before it reaches the detectors.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from core.config.infra_config import InfraConfig
from core.postgres_client import PostgresClient

from .models import Campaign, CampaignDependency, CampaignStatus
from .protocols import DependencyIntegrityError, MalformedRecordError

logger = logging.getLogger(__name__)

SERVICE_NAME = "campaign_conflict_service"

_ORDER_COLUMNS = ("start_date", "end_date", "campaign_name")


def _decode_json(value: Any) -> Any:
    """JSON columns may arrive as text or already decoded"""
    if isinstance(value, str):
        return json.loads(value) if value.strip() else None
    return value


class CampaignRepository:
    """Campaign conflict data repository - PostgreSQL (Async)"""

    def __init__(self, db=None, config: Optional[InfraConfig] = None):
        config = config or InfraConfig.from_env()

        if db is None:
            logger.info(f"Connecting to PostgreSQL at {config.postgres_host}:{config.postgres_port}")
            db = PostgresClient(service_name=SERVICE_NAME, config=config)
        self.db = db
        self.schema = config.postgres_schema

        # Table names
        self.campaigns_table = "marketing_campaigns"
        self.products_table = "campaign_products"
        self.dependencies_table = "campaign_dependencies"

    async def initialize(self):
        """Initialize database connection"""
        logger.info("Campaign conflict repository initialized with PostgreSQL")

    async def close(self):
        """Close database connection"""
        await self.db.close()
        logger.info("Campaign conflict repository database connection closed")

    async def health_check(self) -> bool:
        """Check repository health"""
        try:
            async with self.db:
                result = await self.db.query_row("SELECT 1 as healthy")
            return result is not None
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False

    # ====================
    # Campaign Reads
    # ====================

    async def fetch_campaigns(
        self,
        statuses: Sequence[CampaignStatus],
        order_by: str = "start_date",
    ) -> List[Campaign]:
        """Campaigns in any of the given statuses, ascending by ``order_by``"""
        if order_by not in _ORDER_COLUMNS:
            raise ValueError(f"Unsupported order column: {order_by}")

        status_values = [CampaignStatus(s).value for s in statuses]
        query = f'''
            SELECT id, campaign_name, campaign_type, campaign_status,
                   start_date, end_date, target_audience, budget,
                   channels, discount_percentage
            FROM {self.schema}.{self.campaigns_table}
            WHERE campaign_status = ANY($1::text[])
            ORDER BY {order_by} ASC
        '''

        try:
            async with self.db:
                rows = await self.db.query(query, params=[status_values])
        except Exception as e:
            logger.error(f"Error fetching campaigns with status {status_values}: {e}")
            raise

        campaigns = [self._row_to_campaign(row) for row in rows or []]
        logger.debug(f"Fetched {len(campaigns)} campaigns with status {status_values}")
        return campaigns

    async def fetch_campaign_product_associations(
        self, campaign_ids: Sequence[str]
    ) -> Dict[str, List[str]]:
        """Campaign id -> product ids, in row order"""
        if not campaign_ids:
            return {}

        query = f'''
            SELECT campaign_id, product_id
            FROM {self.schema}.{self.products_table}
            WHERE campaign_id = ANY($1::text[])
        '''

        try:
            async with self.db:
                rows = await self.db.query(query, params=[list(campaign_ids)])
        except Exception as e:
            logger.error(f"Error fetching product associations: {e}")
            raise

        associations: Dict[str, List[str]] = {}
        for row in rows or []:
            campaign_id = row.get("campaign_id")
            product_id = row.get("product_id")
            if campaign_id is None or product_id is None:
                raise MalformedRecordError(
                    f"Product association row missing campaign_id or product_id: {row}",
                    entity="campaign_product",
                    entity_id=str(campaign_id) if campaign_id is not None else None,
                )
            associations.setdefault(str(campaign_id), []).append(str(product_id))
        return associations

    # ====================
    # Dependency Records
    # ====================

    async def fetch_dependency(self, campaign_id: str) -> Optional[CampaignDependency]:
        """Dependency record for a campaign, None when absent"""
        query = f'''
            SELECT campaign_id, depends_on, exclusive_with,
                   required_before, required_after, updated_at
            FROM {self.schema}.{self.dependencies_table}
            WHERE campaign_id = $1
        '''

        try:
            async with self.db:
                row = await self.db.query_row(query, params=[campaign_id])
        except Exception as e:
            logger.error(f"Error fetching dependencies for {campaign_id}: {e}")
            raise

        return self._row_to_dependency(row) if row else None

    async def upsert_dependency(self, record: CampaignDependency) -> bool:
        """
        Insert or replace a dependency record.

        Raises:
            DependencyIntegrityError: If the record breaks its invariants
        """
        problems = record.integrity_violations()
        if problems:
            raise DependencyIntegrityError("; ".join(problems), campaign_id=record.campaign_id)

        query = f'''
            INSERT INTO {self.schema}.{self.dependencies_table} (
                campaign_id, depends_on, exclusive_with,
                required_before, required_after, updated_at
            ) VALUES ($1, $2, $3, $4, $5, $6)
            ON CONFLICT (campaign_id) DO UPDATE SET
                depends_on = EXCLUDED.depends_on,
                exclusive_with = EXCLUDED.exclusive_with,
                required_before = EXCLUDED.required_before,
                required_after = EXCLUDED.required_after,
                updated_at = EXCLUDED.updated_at
        '''
        params = [
            record.campaign_id,
            record.depends_on,
            record.exclusive_with,
            record.required_before,
            record.required_after,
            record.updated_at or datetime.now(timezone.utc),
        ]

        try:
            async with self.db:
                await self.db.execute(query, params=params)
        except Exception as e:
            logger.error(f"Error saving dependencies for {record.campaign_id}: {e}", exc_info=True)
            raise

        logger.info(f"Saved dependencies for campaign {record.campaign_id}")
        return True

    # ====================
    # Row Mappers
    # ====================

    def _row_to_campaign(self, row: Dict[str, Any]) -> Campaign:
        """Convert database row to Campaign model"""
        raw_id = row.get("id")
        campaign_id = str(raw_id) if raw_id is not None else None
        try:
            channels = _decode_json(row.get("channels"))
            return Campaign(
                campaign_id=campaign_id,
                name=row.get("campaign_name"),
                campaign_type=row.get("campaign_type"),
                status=row.get("campaign_status"),
                start_date=row.get("start_date"),
                end_date=row.get("end_date"),
                target_audience=_decode_json(row.get("target_audience")),
                budget=row.get("budget"),
                channels=channels or [],
                discount_percentage=row.get("discount_percentage"),
            )
        except (ValueError, TypeError) as e:
            raise MalformedRecordError(
                f"Malformed campaign row {campaign_id}: {e}",
                entity="campaign",
                entity_id=campaign_id,
            ) from e

    def _row_to_dependency(self, row: Dict[str, Any]) -> CampaignDependency:
        """Convert database row to CampaignDependency model"""
        raw_id = row.get("campaign_id")
        campaign_id = str(raw_id) if raw_id is not None else None
        try:
            return CampaignDependency(
                campaign_id=campaign_id,
                depends_on=_decode_json(row.get("depends_on")),
                exclusive_with=_decode_json(row.get("exclusive_with")),
                required_before=_decode_json(row.get("required_before")),
                required_after=_decode_json(row.get("required_after")),
                updated_at=row.get("updated_at"),
            )
        except (ValueError, TypeError) as e:
            raise MalformedRecordError(
                f"Malformed dependency row {campaign_id}: {e}",
                entity="campaign_dependency",
                entity_id=campaign_id,
            ) from e


__all__ = ["CampaignRepository"]
