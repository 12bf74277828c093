from storage_navigator.core.config import get_data_dir, get_sync_base_url
from storage_navigator.core.controller import PathTreeController

__all__ = ["PathTreeController", "get_data_dir", "get_sync_base_url"]
