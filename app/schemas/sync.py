"""
Sync and submission result schemas.

These tell the caller what happened locally and remotely, separately:
a session can be saved on this device and still not reach the spreadsheet.
"""

from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.session_record import SessionRecord, SessionResponse


class FetchResult(BaseModel):
    """Records parsed from a remote ``get`` query."""

    records: list[SessionRecord] = Field(default_factory=list)
    dropped: int = Field(0, description="Remote items rejected by validation")


class SubmitResult(BaseModel):
    """Outcome of logging one session."""

    session: SessionResponse
    saved_locally: bool = Field(True, description="False when retention dropped the session in the same save")
    synced: bool = False
    warning: Optional[str] = Field(None, description="Why the session was not kept or not sent, if so")


class SyncResult(BaseModel):
    """Outcome of fetching and merging remote sessions."""

    ok: bool
    athlete_name: str
    fetched: int = 0
    dropped: int = 0
    total: int = Field(0, description="Sessions held locally after the merge")
    warning: Optional[str] = None
