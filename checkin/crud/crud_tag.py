# checkin/crud/crud_tag.py
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from checkin.crud.base import CRUDBase
from checkin.models.tag import Tag
from checkin.schemas.tag import TagCreate


class CRUDTag(CRUDBase[Tag, TagCreate]):
    def get_by_name(self, db: Session, *, name: str) -> Optional[Tag]:
        return db.get(self.model, name.strip().lower())

    def get_all(self, db: Session, *, only_current: bool = False) -> List[Tag]:
        """
        Lists tags by name. With only_current, tags with a validity window
        are kept only while "now" falls inside it.
        """
        query = db.query(self.model)
        if only_current:
            now = datetime.now(timezone.utc)
            query = query.filter(
                or_(
                    self.model.start.is_(None),
                    and_(self.model.start <= now, self.model.end >= now),
                )
            )
        return query.order_by(self.model.name).all()


tag = CRUDTag(Tag)
