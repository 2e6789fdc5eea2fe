"""
Schémas Pydantic pour la synchronisation du tracker avec le relevé officiel.
Endpoint : POST /api/users/{auth_user_id}/tracking/sync
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr

from ghostclass.schemas.attendance import AttendanceReport


class PlannedNotification(BaseModel):
    title: str
    description: str
    topic: str
    kind: str              # revision, course_mismatch, updated, conflict
    course_name: str
    date: str
    session: str


class TrackerSyncPlan(BaseModel):
    """Décisions calculées à partir du relevé officiel, avant écriture en base."""
    to_delete: List[int] = []
    to_mark_correction: List[int] = []
    notifications: List[PlannedNotification] = []


class TrackerSyncRequest(BaseModel):
    report: AttendanceReport
    course_names: Dict[str, str] = {}
    email: Optional[EmailStr] = None
    username: str = ""


class TrackerSyncResult(BaseModel):
    """Rapport de synchronisation retourné par le serveur."""
    processed: int
    deletions: int
    updates: int
    conflicts: int
    notifications: int
    emails_sent: int
