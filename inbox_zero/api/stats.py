"""Stats API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from inbox_zero.api.deps import get_current_user
from inbox_zero.db.connection import get_db
from inbox_zero.db.models import NewsletterRepository, User
from inbox_zero.stats import get_newsletter_summary

router = APIRouter(prefix="/api/user/stats")


@router.get("/newsletters/summary")
async def newsletter_summary(user: User = Depends(get_current_user)) -> dict:
    return get_newsletter_summary(NewsletterRepository(get_db()), user.id)
