from db import get_db
from repositories.categories_repository import (
    delete_category as repo_delete_category,
    get_all_categories,
    insert_category as repo_insert_category,
    update_category as repo_update_category,
)
from services.sync_service import push_local_changes


def list_categories():
    conn = get_db()
    try:
        return get_all_categories(conn)
    finally:
        conn.close()


def add_category(name, color):
    conn = get_db()
    try:
        category_id = repo_insert_category(conn, name, color)
    finally:
        conn.close()
    push_local_changes()
    return category_id


def update_category(category_id, name=None, color=None):
    conn = get_db()
    try:
        result = repo_update_category(conn, category_id, name=name, color=color)
    finally:
        conn.close()
    push_local_changes()
    return result


def delete_category(category_id):
    conn = get_db()
    try:
        result = repo_delete_category(conn, category_id)
    finally:
        conn.close()
    push_local_changes()
    return result
