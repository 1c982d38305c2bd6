from slowapi import Limiter
from slowapi.util import get_remote_address
from ebbb_admin.core.config import settings

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.RATE_LIMIT_DEFAULT])
# Limites específicos (login) são aplicados nas rotas.
