# ebbb_admin/services/supabase_service.py
from supabase import create_client, Client
from typing import Optional

from ebbb_admin.core.config import Settings, settings as default_settings
from ebbb_admin.core.logging_config import get_logger

logger = get_logger(__name__)


def create_supabase_client(config: Optional[Settings] = None) -> Optional[Client]:
    """
    Cria o cliente Supabase a partir das configurações.
    Retorna None quando SUPABASE_URL/SUPABASE_KEY não estão definidas ou a
    criação falha; quem usa o cliente reporta isso como erro de configuração.
    """
    config = config or default_settings
    if not config.supabase_configured:
        logger.error("SUPABASE_URL or SUPABASE_KEY not set; store is unavailable")
        return None
    logger.info("Initializing Supabase client for %s...", config.SUPABASE_URL[:30])
    try:
        client = create_client(config.SUPABASE_URL, config.SUPABASE_KEY)
    except Exception:
        logger.exception("Failed to create the Supabase client")
        return None
    logger.info("Supabase client initialized")
    return client
