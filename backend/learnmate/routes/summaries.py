"""
Saved learning-session summaries.

GET    /api/summaries       - list, newest first
GET    /api/summaries/{id}  - fetch one
PUT    /api/summaries/{id}  - create or replace
DELETE /api/summaries/{id}  - remove
"""

import logging
from typing import List

import orjson
from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from learnmate.database import SummaryRecord, get_session
from learnmate.models.learning import LearningSummary, SessionStep
from learnmate.services.session import compute_progress
from learnmate.utils.exceptions import raise_bad_request, raise_not_found
from learnmate.utils.time import from_utc_naive, to_utc_naive

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_model(record: SummaryRecord) -> LearningSummary:
    steps = [SessionStep(**step) for step in orjson.loads(record.steps)]
    return LearningSummary(
        id=record.id,
        topic=record.topic,
        date=from_utc_naive(record.date),
        steps=steps,
        progress=record.progress,
    )


def _encode_steps(summary: LearningSummary) -> str:
    return orjson.dumps([step.model_dump() for step in summary.steps]).decode()


@router.get("/summaries", response_model=List[LearningSummary])
async def list_summaries(session: AsyncSession = Depends(get_session)):
    """List saved summaries, most recent first"""
    result = await session.execute(
        select(SummaryRecord).order_by(SummaryRecord.date.desc())
    )
    return [_to_model(record) for record in result.scalars().all()]


@router.get("/summaries/{summary_id}", response_model=LearningSummary)
async def get_summary(summary_id: str, session: AsyncSession = Depends(get_session)):
    """Fetch a single summary"""
    record = await session.get(SummaryRecord, summary_id)
    if not record:
        raise_not_found("Summary", summary_id)
    return _to_model(record)


@router.put("/summaries/{summary_id}", response_model=LearningSummary)
async def save_summary(
    summary_id: str,
    summary: LearningSummary,
    session: AsyncSession = Depends(get_session),
):
    """
    Create a summary or replace the existing one with the same id.
    Progress is recomputed from the steps' completion flags.
    """
    if summary.id != summary_id:
        raise_bad_request(f"Summary id '{summary.id}' does not match path id '{summary_id}'")

    date = to_utc_naive(summary.date)
    progress = compute_progress(summary.steps)

    record = await session.get(SummaryRecord, summary_id)
    if record:
        record.topic = summary.topic
        record.date = date
        record.steps = _encode_steps(summary)
        record.progress = progress
        logger.info(f"Updated summary {summary_id} ({progress}%)")
    else:
        record = SummaryRecord(
            id=summary.id,
            topic=summary.topic,
            date=date,
            steps=_encode_steps(summary),
            progress=progress,
        )
        session.add(record)
        logger.info(f"Saved new summary {summary_id} for topic '{summary.topic}'")

    await session.commit()
    return _to_model(record)


@router.delete("/summaries/{summary_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_summary(summary_id: str, session: AsyncSession = Depends(get_session)):
    """Delete a summary"""
    record = await session.get(SummaryRecord, summary_id)
    if not record:
        raise_not_found("Summary", summary_id)
    await session.delete(record)
    await session.commit()
