from datetime import date
from decimal import Decimal

import pytest

from models.finance import AfterMonths, BillKind, RecurrencePeriod, TransactionKind, UntilCancelled
from repositories.base_repository import fetch_rows, insert_row, pending_changes, replace_rows
from repositories.bills_repository import delete_bill, get_all_bills, insert_bill, mark_paid, update_bill
from repositories.categories_repository import (
    delete_category,
    get_all_categories,
    insert_category,
    update_category,
)
from repositories.goals_repository import (
    delete_goal,
    delete_goal_transaction,
    get_all_goals,
    get_goal_transactions,
    insert_goal,
    insert_goal_transaction,
    set_current_amount,
    update_goal,
)
from repositories.recurring_repository import (
    delete_recurring,
    get_all_recurring,
    insert_recurring,
    set_active,
)
from repositories.transactions_repository import (
    delete_transaction,
    get_all_transactions,
    insert_transaction,
    update_transaction,
)


def test_default_categories_seeded(conn):
    names = [c.name for c in get_all_categories(conn)]
    assert "Investimentos" in names
    assert len(names) == 8


def test_transactions_parse_sheet_rows(conn):
    insert_row(conn, "transacoes", {
        "id": "1", "data": "2024-01-05", "tipo": "Receita", "descricao": "Salário",
        "valor": "8.500,00", "categoria": "Outros", "forma_pagamento": "Transferência",
    })
    insert_row(conn, "transacoes", {
        "id": "2", "data": "10/01/2024", "tipo": "Despesa", "descricao": "Aluguel",
        "valor": "", "categoria": "Moradia",
    })
    insert_row(conn, "transacoes", {"id": "3", "data": "", "tipo": "Despesa", "valor": "10"})
    insert_row(conn, "transacoes", {"id": "4", "data": "2024-01-11", "tipo": "Transferir", "valor": "10"})

    transactions = get_all_transactions(conn)

    assert [t.id for t in transactions] == ["2", "1"]
    rent, salary = transactions
    assert rent.date == date(2024, 1, 10)
    assert rent.amount == Decimal("0")
    assert salary.kind == TransactionKind.INCOME
    assert salary.amount == Decimal("8500")


def test_insert_and_delete_transaction(conn):
    tx_id = insert_transaction(conn, "2024-03-08", TransactionKind.EXPENSE, " Ações ", 1500, "Investimentos")

    (tx,) = get_all_transactions(conn)
    assert tx.id == tx_id
    assert tx.description == "Ações"
    assert tx.amount == Decimal("1500")

    assert delete_transaction(conn, tx_id)
    assert not delete_transaction(conn, tx_id)
    assert get_all_transactions(conn) == []


def test_recurring_rows_map_to_definitions(conn):
    insert_row(conn, "transacoes_recorrentes", {
        "id": "r1", "descricao": "Aluguel", "tipo": "Despesa", "valor": "2000", "categoria": "Moradia",
        "data_inicio": "2024-01-10", "recorrencia": "mensal", "fim_tipo": "after_months",
        "meses_duracao": "12", "ativo": "true",
    })
    insert_row(conn, "transacoes_recorrentes", {
        "id": "r2", "descricao": "Seguro", "tipo": "Despesa", "valor": "900", "categoria": "Outros",
        "data_inicio": "2024-02-01", "recorrencia": "anual", "fim_tipo": "until_cancelled", "ativo": "FALSE",
    })
    insert_row(conn, "transacoes_recorrentes", {
        "id": "r3", "descricao": "?", "tipo": "Despesa", "valor": "1",
        "data_inicio": "2024-02-01", "recorrencia": "quinzenal",
    })

    r1, r2 = get_all_recurring(conn)

    assert r1.period == RecurrencePeriod.MONTHLY
    assert r1.end_policy == AfterMonths(12)
    assert r1.active
    assert r2.period == RecurrencePeriod.ANNUAL
    assert r2.end_policy == UntilCancelled()
    assert not r2.active


def test_recurring_insert_toggle_delete(conn):
    rid = insert_recurring(conn, TransactionKind.INCOME, "Salário", 8500, "Outros", "2024-01-05",
                           "monthly", duration_months=6)

    row = fetch_rows(conn, "transacoes_recorrentes")[0]
    assert row["recorrencia"] == "mensal"
    assert row["fim_tipo"] == "after_months"
    assert row["ativo"] == "true"

    assert set_active(conn, rid, False)
    assert not get_all_recurring(conn)[0].active
    assert not set_active(conn, "missing", True)

    assert delete_recurring(conn, rid)
    assert get_all_recurring(conn) == []


def test_goals_and_movements(conn):
    insert_row(conn, "metas", {"id": "g1", "nome": "Viagem", "valor_alvo": "5000", "prazo": "2025-12-31"})
    insert_goal_transaction(conn, "g1", "deposito", 300, "2024-01-01")
    insert_goal_transaction(conn, "g2", "retirada", 50, "2024-02-01")

    (goal,) = get_all_goals(conn)
    assert goal.target == Decimal("5000")
    assert goal.deadline == date(2025, 12, 31)

    assert len(get_goal_transactions(conn)) == 2
    (movement,) = get_goal_transactions(conn, "g1")
    assert movement.amount == Decimal("300")


def test_bills_sorted_by_due_date(conn):
    insert_row(conn, "contas", {"id": "b1", "tipo": "pagar", "descricao": "Luz", "valor": "120",
                                "data_vencimento": "2024-05-20", "pago": "false"})
    insert_row(conn, "contas", {"id": "b2", "tipo": "receber", "descricao": "Aluguel sala", "valor": "900",
                                "data_pagamento": "2024-04-02", "pago": "true"})
    insert_row(conn, "contas", {"id": "b3", "tipo": "pagar", "descricao": "Água", "valor": "80",
                                "data_vencimento": "2024-05-01", "pago": "false"})

    bills = get_all_bills(conn)

    assert [b.id for b in bills] == ["b3", "b1", "b2"]
    assert bills[2].kind == BillKind.RECEIVABLE
    assert bills[2].paid
    assert bills[2].paid_date == date(2024, 4, 2)


def test_update_transaction(conn):
    tx_id = insert_transaction(conn, "2024-03-08", TransactionKind.EXPENSE, "Mercado", 200, "Alimentação")

    assert update_transaction(conn, tx_id, {"amount": 250, "date": "2024-03-09", "kind": "Receita"})
    assert not update_transaction(conn, "missing", {"amount": 1})

    (tx,) = get_all_transactions(conn)
    assert tx.amount == Decimal("250")
    assert tx.date == date(2024, 3, 9)
    assert tx.kind == TransactionKind.INCOME
    assert tx.description == "Mercado"


def test_update_transaction_rejects_unknown_field(conn):
    tx_id = insert_transaction(conn, "2024-03-08", TransactionKind.EXPENSE, "Mercado", 200, "Alimentação")

    with pytest.raises(ValueError):
        update_transaction(conn, tx_id, {"valor": 1})


def test_category_writes(conn):
    replace_rows(conn, "categorias", [])

    cat_id = insert_category(conn, " Pets ", "#f97316")
    assert update_category(conn, cat_id, color="#000000")

    (category,) = get_all_categories(conn)
    assert (category.name, category.color) == ("Pets", "#000000")

    assert delete_category(conn, cat_id)
    assert get_all_categories(conn) == []


def test_goal_writes(conn):
    goal_id = insert_goal(conn, "Reserva", 10000, deadline="2025-06-30", color="#22c55e")
    assert update_goal(conn, goal_id, {"target": 12000, "deadline": None})

    (goal,) = get_all_goals(conn)
    assert goal.target == Decimal("12000")
    assert goal.deadline is None

    assert set_current_amount(conn, goal_id, Decimal("300"))
    assert fetch_rows(conn, "metas")[0]["valor_atual"] == "300"

    movement_id = insert_goal_transaction(conn, goal_id, "deposito", 300, "2024-01-01")
    assert delete_goal_transaction(conn, movement_id)
    assert get_goal_transactions(conn, goal_id) == []

    assert delete_goal(conn, goal_id)
    assert not delete_goal(conn, goal_id)


def test_bill_writes(conn):
    bill_id = insert_bill(conn, BillKind.PAYABLE, "Luz", 120, "Moradia", due_date="2024-05-20")

    (bill,) = get_all_bills(conn)
    assert not bill.paid
    assert bill.due_date == date(2024, 5, 20)

    assert update_bill(conn, bill_id, {"amount": 135})
    assert mark_paid(conn, bill_id, "2024-05-18")
    (bill,) = get_all_bills(conn)
    assert bill.amount == Decimal("135")
    assert bill.paid
    assert bill.paid_date == date(2024, 5, 18)

    assert mark_paid(conn, bill_id, None)
    (bill,) = get_all_bills(conn)
    assert not bill.paid
    assert bill.paid_date is None

    assert delete_bill(conn, bill_id)
    assert get_all_bills(conn) == []
    assert not mark_paid(conn, bill_id, "2024-05-18")


def test_writes_are_queued_for_the_spreadsheet(conn):
    tx_id = insert_transaction(conn, "2024-03-08", TransactionKind.EXPENSE, "Mercado", 200, "Alimentação")
    update_transaction(conn, tx_id, {"amount": 250})
    delete_transaction(conn, tx_id)
    replace_rows(conn, "transacoes", [{"id": "from-sheet"}])

    changes = pending_changes(conn)

    assert [(c["table_name"], c["row_id"], c["action"]) for c in changes] == [
        ("transacoes", tx_id, "insert"),
        ("transacoes", tx_id, "update"),
        ("transacoes", tx_id, "delete"),
    ]
