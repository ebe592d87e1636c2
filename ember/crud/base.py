from typing import Any, Dict, List, Optional
from supabase import Client
from ember.db.supabase_client import get_supabase_client
from ember.logging import setup_logger
from ember.services.focus.errors import StorageError


class BaseCRUD:
    """Base CRUD class for Supabase"""

    table_name: str = ""

    def __init__(self, client: Optional[Client] = None):
        self.supabase: Client = client if client is not None else get_supabase_client()
        self.logger = setup_logger(__name__)

    async def get_by(self, column: str, value: Any) -> Optional[Dict[str, Any]]:
        """Get the first record where column equals value"""
        try:
            result = (
                self.supabase.table(self.table_name)
                .select("*")
                .eq(column, value)
                .limit(1)
                .execute()
            )
        except Exception as e:
            self.logger.error(f"Error getting {self.table_name} by {column}: {e}")
            raise StorageError(f"Error reading {self.table_name}") from e
        return result.data[0] if result.data else None

    async def list_by(
        self, column: str, value: Any, order_by: Optional[str] = None, desc: bool = True
    ) -> List[Dict[str, Any]]:
        """List records where column equals value, optionally ordered"""
        try:
            query = self.supabase.table(self.table_name).select("*").eq(column, value)
            if order_by:
                query = query.order(order_by, desc=desc)
            result = query.execute()
        except Exception as e:
            self.logger.error(f"Error listing {self.table_name} by {column}: {e}")
            raise StorageError(f"Error reading {self.table_name}") from e
        return result.data or []
