"""app.services.procurement.expression_search_service

Listing, filtering and dashboard counters for need expressions.
Read-only; no locks are taken.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import func

from app import db
from app.buisness.procurement.errors import InvalidInput
from app.buisness.procurement.status_validator import ExpressionStatus
from app.data.procurement import NeedExpression


@dataclass(frozen=True)
class ExpressionSearchFilters:
    status: Optional[str] = None
    search: Optional[str] = None  # case-insensitive substring of the title
    creator_id: Optional[int] = None
    division_id: Optional[int] = None


class ExpressionSearchService:
    """Search utilities for need expressions."""

    @staticmethod
    def parse_filters(args: Any) -> ExpressionSearchFilters:
        """
        Parse filter args from a Flask `request.args`-like mapping.
        Accepts `search_term` as an alias of `search`.
        """
        def _get_int(key: str) -> Optional[int]:
            raw = args.get(key)
            if raw in (None, ""):
                return None
            try:
                return int(raw)
            except (TypeError, ValueError):
                raise InvalidInput(f"{key} must be an integer", field=key, value=raw)

        search = (args.get("search") or args.get("search_term") or "").strip() or None
        return ExpressionSearchFilters(
            status=args.get("status") or None,
            search=search,
            creator_id=_get_int("creator_id"),
            division_id=_get_int("division_id"),
        )

    @staticmethod
    def list_expressions(
        status: Optional[str] = None,
        search: Optional[str] = None,
        creator_id: Optional[int] = None,
        division_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> list[NeedExpression]:
        """Newest first."""
        if status is not None and status not in ExpressionStatus.ALL:
            raise InvalidInput(f"Unknown status '{status}'", field="status", allowed=list(ExpressionStatus.ALL))

        query = NeedExpression.query
        if status:
            query = query.filter(NeedExpression.status == status)
        if creator_id is not None:
            query = query.filter(NeedExpression.created_by_id == creator_id)
        if division_id is not None:
            query = query.filter(NeedExpression.division_id == division_id)
        if search:
            query = query.filter(func.lower(NeedExpression.title).contains(search.lower(), autoescape=True))

        query = query.order_by(NeedExpression.created_at.desc(), NeedExpression.id.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def search(filters: ExpressionSearchFilters, limit: Optional[int] = None) -> list[NeedExpression]:
        return ExpressionSearchService.list_expressions(
            status=filters.status,
            search=filters.search,
            creator_id=filters.creator_id,
            division_id=filters.division_id,
            limit=limit,
        )

    @staticmethod
    def dashboard_counts(creator_id: Optional[int] = None) -> dict[str, int]:
        """Count per status (every status present, zero when empty) plus ``total``."""
        query = db.session.query(NeedExpression.status, func.count(NeedExpression.id))
        if creator_id is not None:
            query = query.filter(NeedExpression.created_by_id == creator_id)
        rows = query.group_by(NeedExpression.status).all()

        counts = {status: 0 for status in ExpressionStatus.ALL}
        for status, count in rows:
            counts[status] = int(count)
        counts["total"] = sum(counts.values())
        return counts
