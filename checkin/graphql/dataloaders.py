# checkin/graphql/dataloaders.py
"""
DataLoaders for batching local lookups made while resolving forwarded users.

A `users` or `search_user_simple` page resolves `tags` once per user; the
loader turns those into a single attendee query per request.
"""
from typing import Any, Dict, List

from sqlalchemy.orm import Session
from strawberry.dataloader import DataLoader

from checkin import crud
from checkin.services.views import tag_states_view


async def batch_load_attendee_tags(keys: List[str], db: Session) -> List[List[Dict[str, Any]]]:
    """
    Batch load tag state views by attendee IDs.

    Instead of N individual queries:
        SELECT * FROM attendees WHERE id = 'u1';
        SELECT * FROM attendees WHERE id = 'u2';

    Makes 1 query:
        SELECT * FROM attendees WHERE id IN ('u1', 'u2', ...);
    """
    attendees = crud.attendee.get_multi_by_ids(db, ids=list(keys))
    attendee_map = {attendee.id: attendee for attendee in attendees}

    # Unknown attendees simply have no tags yet
    return [tag_states_view(attendee_map.get(key)) for key in keys]


def create_dataloaders(db: Session) -> Dict[str, DataLoader]:
    """
    Factory function to create all DataLoaders for a GraphQL request.

    Called once per request in the GraphQL context getter.
    """
    return {
        "attendee_tags_loader": DataLoader(
            load_fn=lambda keys: batch_load_attendee_tags(keys, db)
        ),
    }
