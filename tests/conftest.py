import pytest

from pizza_store import DatabaseManager, Session


@pytest.fixture(autouse=True)
def no_color(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")


@pytest.fixture
def db():
    """empty schema, no seed rows"""
    manager = DatabaseManager(":memory:", seed=False)
    yield manager
    manager.close()


@pytest.fixture
def populated(db):
    """a customer, a driver, a manager, two open stores + one closed, four items"""
    db.conn.executemany(
        "INSERT INTO Users(login, password, role, favoriteItems, phoneNum) VALUES (?, ?, ?, NULL, ?);",
        [
            ("alice", "pw1", "customer", "555-0001"),
            ("bob", "pw2", "customer", "555-0002"),
            ("dan", "pw3", "driver", "555-0003"),
            ("meg", "pw4", "manager", "555-0004"),
        ],
    )
    db.conn.executemany(
        "INSERT INTO Store(storeID, address, city, state, isOpen, reviewScore) VALUES (?, ?, ?, ?, ?, ?);",
        [
            (1, "1 First St", "Riverside", "CA", 1, 4.0),
            (2, "2 Second St", "Riverside", "CA", 0, 3.0),
            (3, "3 Third St", "Corona", "CA", 1, 5.0),
        ],
    )
    db.conn.executemany(
        "INSERT INTO Items(itemName, ingredients, typeOfItem, price, description) VALUES (?, ?, ?, ?, ?);",
        [
            ("Cheese Pizza", "dough, cheese", "entree", 12.5, "plain"),
            ("Wings", "chicken, sauce", "sides", 8.25, None),
            ("Soda", "water, sugar", "drinks", 2.0, None),
            ("Water", "water", "drinks", 1.0, None),
        ],
    )
    return db


@pytest.fixture
def feed(monkeypatch):
    """script answers for input(); running out raises EOFError like a closed stdin"""
    def _feed(*answers):
        it = iter(answers)

        def fake_input(_prompt=""):
            try:
                return next(it)
            except StopIteration:
                raise EOFError
        monkeypatch.setattr("builtins.input", fake_input)
    return _feed


@pytest.fixture
def customer():
    return Session("alice", "customer")


@pytest.fixture
def driver():
    return Session("dan", "driver")


@pytest.fixture
def manager():
    return Session("meg", "manager")


def insert_order(db, order_id, login, ts, total=10.0, store_id=1, status="incomplete"):
    db.conn.execute(
        "INSERT INTO FoodOrder(orderID, login, storeID, orderTimestamp, totalPrice, orderStatus) VALUES (?, ?, ?, ?, ?, ?);",
        (order_id, login, store_id, ts, total, status),
    )


@pytest.fixture
def add_order(populated):
    def _add(*args, **kwargs):
        insert_order(populated, *args, **kwargs)
    return _add
