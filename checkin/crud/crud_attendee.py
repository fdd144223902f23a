# checkin/crud/crud_attendee.py
from typing import List

from pydantic import BaseModel
from sqlalchemy.orm import Session

from checkin.crud.base import CRUDBase
from checkin.models.attendee import Attendee


class CRUDAttendee(CRUDBase[Attendee, BaseModel]):
    def get_multi_by_ids(self, db: Session, *, ids: List[str]) -> List[Attendee]:
        if not ids:
            return []
        return db.query(self.model).filter(self.model.id.in_(ids)).all()

    def build_from_identity(self, db: Session, *, id: str, identity: dict) -> Attendee:
        """
        Adds (without committing) a local attendee built from the upstream
        identity fields. The caller's transaction decides whether it persists.
        """
        email = identity.get("email")
        attendee = Attendee(
            id=id,
            name=identity.get("name") or "",
            emails=[email] if email else [],
            tag_states={},
        )
        db.add(attendee)
        return attendee


attendee = CRUDAttendee(Attendee)
