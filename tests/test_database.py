import sqlite3
from contextlib import closing

import pytest

from pizza_store import ORDER_ID_BASELINE, DatabaseManager, MenuManager, OrderManager, Session, database_path


def test_schema_has_all_tables(db):
    rows = db.execute_query_and_return_result(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name;"
    )
    names = {r[0] for r in rows}
    assert {"Users", "Store", "Items", "FoodOrder", "ItemsInOrder"} <= names


def test_results_are_text_with_none_for_null(populated):
    rows = populated.execute_query_and_return_result(
        "SELECT itemName, price, description FROM Items WHERE itemName=?;", ("Wings",)
    )
    assert rows == [["Wings", "8.25", None]]


def test_execute_query_counts_rows(populated):
    assert populated.execute_query("SELECT 1 FROM Items WHERE typeOfItem=?;", ("drinks",)) == 2
    assert populated.execute_query("SELECT 1 FROM Items WHERE typeOfItem=?;", ("desserts",)) == 0


def test_print_result_prints_header_and_rows(populated, capsys):
    count = populated.execute_query_and_print_result(
        "SELECT login, role FROM Users WHERE role=? ORDER BY login;", ("customer",)
    )
    out = capsys.readouterr().out.splitlines()
    assert count == 2
    assert out[0] == "login\trole"
    assert out[1:] == ["alice\tcustomer", "bob\tcustomer"]


def test_parameters_are_bound_not_interpolated(populated):
    hostile = "x'; DROP TABLE Items; --"
    populated.execute_update(
        "UPDATE Users SET favoriteItems=? WHERE login=?;", (hostile, "alice")
    )
    assert populated.execute_query("SELECT 1 FROM Items;") == 4
    rows = populated.execute_query_and_return_result(
        "SELECT favoriteItems FROM Users WHERE login=?;", ("alice",)
    )
    assert rows[0][0] == hostile


def test_malformed_sql_raises(db):
    with pytest.raises(sqlite3.OperationalError):
        db.execute_update("UPDAT Users SET role='x';")


def test_order_sequence_starts_at_baseline(populated):
    assert populated.current_sequence_value("FoodOrder") == ORDER_ID_BASELINE - 1
    populated.execute_update(
        "INSERT INTO FoodOrder(login, storeID, totalPrice) VALUES (?, ?, ?);", ("alice", 1, 3.0)
    )
    assert populated.current_sequence_value("FoodOrder") == ORDER_ID_BASELINE


def test_sequence_value_for_unknown_table(db):
    assert db.current_sequence_value("Nope") == -1


def test_transaction_commits(populated):
    with populated.transaction():
        populated.execute_update("UPDATE Store SET isOpen=0 WHERE storeID=?;", (1,))
    assert populated.execute_query("SELECT 1 FROM Store WHERE isOpen=1;") == 1


def test_transaction_rolls_back_on_error(populated):
    with pytest.raises(RuntimeError):
        with populated.transaction():
            populated.execute_update("UPDATE Store SET isOpen=0;")
            raise RuntimeError("boom")
    assert populated.execute_query("SELECT 1 FROM Store WHERE isOpen=1;") == 2


def test_non_numeric_price_rejected_by_database(db):
    with pytest.raises(sqlite3.IntegrityError):
        db.execute_update(
            "INSERT INTO Items(itemName, ingredients, typeOfItem, price) VALUES (?, ?, ?, ?);",
            ("Calzone", "dough", "entree", "cheap"),
        )


def test_numeric_price_text_is_stored_as_real(db):
    db.execute_update(
        "INSERT INTO Items(itemName, ingredients, typeOfItem, price) VALUES (?, ?, ?, ?);",
        ("Calzone", "dough", "entree", "11.50"),
    )
    row = db.conn.execute("SELECT price, typeof(price) FROM Items;").fetchone()
    assert row == (11.5, "real")


def test_non_positive_price_rejected(db):
    with pytest.raises(sqlite3.IntegrityError):
        db.execute_update(
            "INSERT INTO Items(itemName, ingredients, typeOfItem, price) VALUES (?, ?, ?, ?);",
            ("Free", "air", "sides", 0),
        )


def test_seed_is_idempotent(tmp_path):
    path = str(tmp_path / "pizza.db")
    DatabaseManager(path).close()
    manager = DatabaseManager(path)
    try:
        assert manager.execute_query("SELECT 1 FROM Users WHERE login='admin' AND role='manager';") == 1
        assert manager.execute_query("SELECT 1 FROM Store WHERE isOpen=1;") == 3
        assert manager.execute_query("SELECT 1 FROM Items;") == 7
    finally:
        manager.close()


def test_close_is_idempotent(db):
    db.close()
    db.close()
    assert db.conn is None


@pytest.mark.parametrize("name, expected", [
    ("pizza", "pizza.db"),
    ("pizza.db", "pizza.db"),
    (":memory:", ":memory:"),
])
def test_database_path(name, expected):
    assert database_path(name) == expected


LEGACY_SCHEMA = """
CREATE TABLE Users (login TEXT PRIMARY KEY, password TEXT, role TEXT, favoriteItems TEXT, phoneNum TEXT);
CREATE TABLE Store (storeID INTEGER PRIMARY KEY, address TEXT, city TEXT, state TEXT, isOpen INTEGER, reviewScore REAL);
CREATE TABLE Items (itemName TEXT PRIMARY KEY, ingredients TEXT, typeOfItem TEXT, price REAL, description TEXT);
CREATE TABLE FoodOrder (orderID INTEGER PRIMARY KEY, login TEXT, storeID INTEGER,
                        orderTimestamp TEXT, totalPrice REAL, orderStatus TEXT);
CREATE TABLE ItemsInOrder (orderID INTEGER, itemName TEXT, quantity INTEGER);
INSERT INTO FoodOrder VALUES (7, 'admin', 1, '2024-01-01 12:00:00', 4.0, 'complete');
"""


def test_existing_database_without_autoincrement(tmp_path, feed):
    path = str(tmp_path / "course.db")
    with closing(sqlite3.connect(path)) as conn:
        conn.executescript(LEGACY_SCHEMA)

    manager = DatabaseManager(path)
    try:
        assert not manager.uses_autoincrement("FoodOrder")
        assert manager.current_sequence_value("FoodOrder") == -1
        orders = OrderManager(manager, MenuManager(manager))
        feed("1", "Cola", "2", "cola", "1", "done")
        order_id = orders.place_order(Session("admin", "manager"))
        assert order_id == 8
        assert manager.execute_query_and_return_result(
            "SELECT orderID, itemName, quantity FROM ItemsInOrder;"
        ) == [["8", "Cola", "3"]]
        assert manager.execute_query_and_return_result(
            "SELECT totalPrice FROM FoodOrder WHERE orderID=?;", (8,)
        ) == [["5.97"]]
    finally:
        manager.close()


def test_new_database_declares_autoincrement(db):
    assert db.uses_autoincrement("FoodOrder")
    assert not db.uses_autoincrement("Items")
