"""Data Access Objects for the Supabase store."""

from swimcoach.dao.base import BaseDAO, close_supabase_client, create_supabase_client
from swimcoach.dao.entries_load_dao import EntriesLoadDAO
from swimcoach.dao.swim_time_dao import SWIM_TIME_CONFLICT_KEY, SwimTimeDAO
from swimcoach.dao.swimmer_dao import SwimmerDAO, split_full_name

__all__ = [
    "BaseDAO",
    "EntriesLoadDAO",
    "SWIM_TIME_CONFLICT_KEY",
    "SwimTimeDAO",
    "SwimmerDAO",
    "close_supabase_client",
    "create_supabase_client",
    "split_full_name",
]
