"""
Modèle SQLAlchemy pour les entrées du tracker (corrections et séances extra).

Une entrée appartient toujours à un seul utilisateur (auth_user_id) :
- status = "correction" : remplace la présence officielle d'une séance
- status = "extra"      : séance absente du relevé officiel
"""

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import UUID

from ghostclass.database import Base


class TrackedEntry(Base):
    """Correction ou séance extra saisie par l'étudiant."""
    __tablename__ = "tracker"
    __table_args__ = (
        CheckConstraint("status IN ('correction', 'extra')", name="tracker_status_check"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    auth_user_id = Column(UUID(as_uuid=True), nullable=False, index=True)

    course = Column(String(64), nullable=False)      # ID du cours Ezygo
    date = Column(String(32), nullable=False)        # Format libre, normalisé à la comparaison
    session = Column(String(32), nullable=False)     # "1st Hour", "II", "3"...
    year = Column(String(16), nullable=True)
    semester = Column(String(16), nullable=True)

    status = Column(String(20), nullable=False, default="correction")
    attendance = Column(Integer, nullable=False, default=110)  # Code Ezygo (110 = présent)
    remarks = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
