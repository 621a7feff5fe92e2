"""Asset queries, aggregate stats and whole-set replacement for a configuration."""

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from prowler_dashboard.models import Asset, ProwlerConfiguration
from prowler_dashboard.schemas.assets import AssetFilters, AssetStats, ProwlerResource

logger = logging.getLogger(__name__)


def _matches_search(asset: Asset, needle: str) -> bool:
    return needle in (asset.resource_name or "").lower() or needle in (asset.resource_id or "").lower()


def query_assets(
    db: Session,
    configuration_id: str,
    filters: AssetFilters | None = None,
) -> list[Asset]:
    """
    Assets for one configuration, most recently updated first.

    resource_type, status and severity are equality filters ANDed into a single
    query. search is then applied in Python as a case-insensitive substring
    match on resource_name or resource_id. Empty filter values are ignored.
    """
    filters = filters or AssetFilters()
    query = db.query(Asset).filter(Asset.configuration_id == configuration_id)
    if filters.resource_type:
        query = query.filter(Asset.resource_type == filters.resource_type)
    if filters.status:
        query = query.filter(Asset.status == filters.status)
    if filters.severity:
        query = query.filter(Asset.severity == filters.severity)
    results = query.order_by(Asset.updated_at.desc()).all()

    if filters.search:
        needle = filters.search.lower()
        return [a for a in results if _matches_search(a, needle)]
    return results


def asset_stats(db: Session, configuration_id: str) -> AssetStats:
    """Counts and latest check time over every asset of the configuration."""
    assets = db.query(Asset).filter(Asset.configuration_id == configuration_id).all()
    checked = [a.last_checked_at or a.updated_at for a in assets]
    checked = [ts for ts in checked if ts is not None]
    return AssetStats(
        total_resources=len(assets),
        critical_issues=sum(1 for a in assets if a.severity == "critical"),
        compliant_resources=sum(1 for a in assets if a.status == "compliant"),
        last_scan=max(checked) if checked else None,
    )


def replace_assets(
    db: Session,
    configuration_id: str,
    resources: Iterable[ProwlerResource],
) -> int:
    """
    Swap the configuration's asset set for a new one in a single transaction.
    Readers never observe the empty set between delete and insert. Returns the number inserted.

    The configuration row is locked (FOR UPDATE) before the delete so concurrent
    syncs for the same configuration serialize instead of both inserting.
    """
    rows = [
        Asset(
            configuration_id=configuration_id,
            resource_id=r.id,
            resource_name=r.name,
            resource_type=r.type,
            region=r.region,
            status=r.status,
            severity=r.severity,
            raw_data=r.raw_data,
            last_checked_at=r.last_checked,
        )
        for r in resources
    ]
    try:
        db.query(ProwlerConfiguration).filter(
            ProwlerConfiguration.id == configuration_id
        ).with_for_update().first()
        deleted = (
            db.query(Asset)
            .filter(Asset.configuration_id == configuration_id)
            .delete(synchronize_session=False)
        )
        db.add_all(rows)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info(
        "Replaced assets for configuration id=%s: deleted=%s inserted=%s",
        configuration_id,
        deleted,
        len(rows),
    )
    return len(rows)
