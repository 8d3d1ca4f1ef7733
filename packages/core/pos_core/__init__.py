from pos_core.logging import get_logger, request_id_context, setup_logging
from pos_core.settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "get_logger", "request_id_context", "setup_logging"]
