from models.finance import Category
from repositories.base_repository import delete_row, fetch_rows, insert_row, new_row_id, update_row

TABLE = "categorias"


def get_all_categories(conn):
    """
    Return all categories in sheet order.
    """
    return [
        Category(
            id=str(r.get("id") or ""),
            name=str(r.get("nome") or ""),
            color=str(r.get("cor") or ""),
        )
        for r in fetch_rows(conn, TABLE)
    ]


def insert_category(conn, name, color):
    row_id = new_row_id()
    insert_row(conn, TABLE, {"id": row_id, "nome": name.strip(), "cor": color})
    return row_id


def update_category(conn, category_id, name=None, color=None):
    changes = {}
    if name is not None:
        changes["nome"] = name.strip()
    if color is not None:
        changes["cor"] = color
    return update_row(conn, TABLE, category_id, changes)


def delete_category(conn, category_id):
    return delete_row(conn, TABLE, category_id)
