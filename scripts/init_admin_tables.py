#!/usr/bin/env python
"""
Verifica se as tabelas de administração existem no Supabase e, caso
contrário, mostra o SQL para criá-las no Editor SQL do projeto.
"""
import sys
from datetime import datetime, timezone

from ebbb_admin.core.config import settings
from ebbb_admin.core.exceptions import StoreError
from ebbb_admin.services.admin_store import AdminStore
from ebbb_admin.services.supabase_service import create_supabase_client


def admin_tables_sql(users_table: str = settings.ADMIN_USERS_TABLE, sessions_table: str = settings.ADMIN_SESSIONS_TABLE) -> str:
    return f"""
-- Administradores
CREATE TABLE IF NOT EXISTS {users_table} (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    username TEXT UNIQUE NOT NULL,
    email TEXT UNIQUE NOT NULL,
    password_hash TEXT NOT NULL,
    full_name TEXT NOT NULL DEFAULT '',
    role TEXT NOT NULL DEFAULT 'admin' CHECK (role IN ('admin', 'super_admin')),
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    last_login TIMESTAMP WITH TIME ZONE,
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);

-- Sessões
CREATE TABLE IF NOT EXISTS {sessions_table} (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id UUID NOT NULL REFERENCES {users_table}(id) ON DELETE CASCADE,
    session_token TEXT UNIQUE NOT NULL,
    expires_at TIMESTAMP WITH TIME ZONE NOT NULL,
    ip_address TEXT,
    user_agent TEXT,
    created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW()
);

-- Índices
CREATE INDEX IF NOT EXISTS idx_{sessions_table}_user ON {sessions_table}(user_id);
CREATE INDEX IF NOT EXISTS idx_{sessions_table}_expires ON {sessions_table}(expires_at);
"""


def check_tables(store: AdminStore) -> bool:
    try:
        store.get_active_admin_by_username("")
        print(f"Tabela '{store.users_table}' verificada.")
        store.get_valid_session("", datetime.now(timezone.utc))
        print(f"Tabela '{store.sessions_table}' verificada.")
    except StoreError as e:
        print(f"Erro ao verificar tabelas: {e.message}")
        return False
    return True


def main() -> int:
    client = create_supabase_client()
    if client is None:
        print("SUPABASE_URL e SUPABASE_KEY não configurados no ambiente")
        return 1

    store = AdminStore(client)
    if check_tables(store):
        print("Todas as tabelas foram verificadas com sucesso!")
        return 0

    print("\nAlgumas tabelas podem não existir. Execute o SQL abaixo no Editor SQL do Supabase:")
    print(admin_tables_sql(store.users_table, store.sessions_table))
    return 1


if __name__ == "__main__":
    sys.exit(main())
