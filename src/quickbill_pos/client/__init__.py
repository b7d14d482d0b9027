from .api import PosApiClient, RemoteLogger
from .session import SessionContext, catalog_item_from_json

__all__ = ["PosApiClient", "RemoteLogger", "SessionContext", "catalog_item_from_json"]
