"""Dependency injection for FastAPI endpoints"""

from datetime import date
from typing import Optional

from fastapi import Query, Request

from finance_gateway.config import settings
from finance_gateway.domain.models import EngineTables


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_engine_tables() -> EngineTables:
    """Keyword set and category map from configuration"""
    return settings.engine_tables()


def get_reference_date(
    reference: Optional[date] = Query(None, description="'As of' day (YYYY-MM-DD); defaults to today"),
) -> date:
    """
    The only place the service reads the clock. The engine itself always
    receives the reference day explicitly.
    """
    return reference or date.today()
