import duckdb
import logging

import config

# -----------------------------
# Logging
# -----------------------------
logging.basicConfig(
    filename=config.LOG_FILE,
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)

def log_info(msg):
    logging.info(msg)
    print(msg)

def log_error(msg):
    logging.error(msg)
    print(msg)

# -----------------------------
# Sheet tabs mirrored locally
# -----------------------------
# Each table keeps the spreadsheet's own headers and raw text cells;
# repositories do the parsing.
SHEET_TABLES = {
    "transacoes": [
        "id", "data", "tipo", "descricao", "valor", "categoria", "forma_pagamento", "observacao",
    ],
    "categorias": ["id", "nome", "cor"],
    "metas": ["id", "nome", "valor_alvo", "valor_atual", "prazo", "cor"],
    "movimentacoes_metas": ["id", "goal_id", "tipo", "valor", "data", "observacao"],
    "transacoes_recorrentes": [
        "id", "descricao", "tipo", "valor", "categoria", "forma_pagamento",
        "data_inicio", "recorrencia", "fim_tipo", "meses_duracao", "ativo", "observacao",
    ],
    "contas": [
        "id", "tipo", "descricao", "valor", "categoria", "data_vencimento", "data_pagamento", "pago", "observacao",
    ],
}

# Local writes waiting to be pushed to the spreadsheet, oldest first.
PENDING_TABLE = "pending_changes"

DEFAULT_CATEGORIES = [
    ("1", "Alimentação", "#a78bfa"),
    ("2", "Moradia", "#c084fc"),
    ("3", "Transporte", "#818cf8"),
    ("4", "Educação", "#8b5cf6"),
    ("5", "Saúde", "#737373"),
    ("6", "Lazer", "#a855f7"),
    ("7", "Investimentos", "#22c55e"),
    ("8", "Outros", "#6b7280"),
]

# -----------------------------
# Get a DB connection
# -----------------------------
def get_db():
    """
    Returns a new DuckDB connection.
    """
    return duckdb.connect(config.DB_FILE)

# -----------------------------
# Initialize database schema
# -----------------------------
def init_db():
    conn = get_db()
    try:
        for table, columns in SHEET_TABLES.items():
            column_sql = ",\n".join(f"{col} VARCHAR" for col in columns)
            conn.execute(f"CREATE TABLE IF NOT EXISTS {table} (\n{column_sql}\n);")
            log_info(f"Table {table} ensured.")

        conn.execute("CREATE SEQUENCE IF NOT EXISTS pending_changes_seq START 1;")
        conn.execute(f"""
        CREATE TABLE IF NOT EXISTS {PENDING_TABLE} (
            seq BIGINT DEFAULT nextval('pending_changes_seq'),
            table_name VARCHAR,
            row_id VARCHAR,
            action VARCHAR
        );
        """)
        log_info(f"Table {PENDING_TABLE} ensured.")

        count = conn.execute("SELECT COUNT(*) FROM categorias").fetchone()[0]
        if count == 0:
            conn.executemany(
                "INSERT INTO categorias (id, nome, cor) VALUES (?, ?, ?)",
                DEFAULT_CATEGORIES
            )
            log_info("Default categories inserted.")

    except Exception as e:
        log_error(f"Error initializing DB: {e}")
        raise
    finally:
        conn.close()
        log_info("Database setup complete and connection closed.")
