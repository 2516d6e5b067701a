"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from society_ledger.infrastructure.clients.notifier import ReminderClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_reminder_client() -> ReminderClient:
    """Provide reminder webhook client instance"""
    return ReminderClient()
