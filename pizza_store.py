#!/usr/bin/env python3.13

# pizza-store: menu driven client for the pizza ordering database
# --sql is used for syntax highlighting inline sql queries

import sqlite3
import signal
import sys
import atexit
from contextlib import closing, contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Sequence
from enum import Enum

from termcolor import cprint, colored
from colorama import just_fix_windows_console as enable_windows_ansi_interpretation

# fix windows terminal misinterpreting ansi escape sequences
enable_windows_ansi_interpretation()

# constants
ORDER_ID_BASELINE = 10000
RECENT_ORDER_LIMIT = 5
DONE_KEYWORD = "done"
DB_SUFFIX = ".db"
USAGE = "usage: pizza-store <dbname> <port> <user>"

# helpers
def safe_int(value: str, minimum: int | None = None):
    """return int value or none if invalid / below minimum"""
    try:
        v = int(value)
        if minimum is not None and v < minimum:
            return None
        return v
    except ValueError:
        return None

def safe_float(value: str):
    """return float value or none if invalid"""
    try:
        return float(value)
    except ValueError:
        return None

def color_money(amount: float) -> str:
    """format amount as green money string"""
    return colored(f"${amount:.2f}", "green")

def error(message: str):
    """report a failure on stderr"""
    cprint(message, "red", file=sys.stderr)

def header(title: str):
    print()
    cprint(title, attrs=["bold"])
    print("-" * max(len(title), 13))

def prompt(text: str) -> str:
    """read one line of free text, trimmed"""
    return input(colored(text, "magenta")).strip()

def read_int(text: str, minimum: int | None = None) -> int:
    """re-prompt until an integer (>= minimum) is entered"""
    while True:
        value = safe_int(input(text).strip(), minimum)
        if value is not None:
            return value
        cprint("your input is invalid!", "red")

def read_choice() -> int:
    return read_int("please make your choice: ")

def timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")

def database_path(dbname: str) -> str:
    """map the database name argument onto a sqlite file"""
    if dbname == ":memory:" or dbname.endswith(DB_SUFFIX):
        return dbname
    return f"{dbname}{DB_SUFFIX}"

class EmptyOrderError(Exception):
    """raised to discard an order that never received a line item"""
    def __init__(self, order_id: int):
        super().__init__(f"order #{order_id} has no items")
        self.order_id = order_id

# database layer
class DatabaseManager:
    """own the single sqlite connection, the schema and the raw query helpers"""
    def __init__(self, path: str, seed: bool = True):
        self.conn: sqlite3.Connection | None = sqlite3.connect(path)
        try:
            self.conn.autocommit = True
            self.conn.execute("--sql\nPRAGMA foreign_keys=ON;")
            self._create_schema()
            self._prime_order_sequence()
            if seed:
                self._seed()
        except sqlite3.Error:
            self.close()
            raise

    def _create_schema(self):
        """create tables if missing; an existing database is used as-is"""
        self.conn.executescript(
            """--sql
            CREATE TABLE IF NOT EXISTS Users (
                login TEXT PRIMARY KEY,
                password TEXT NOT NULL, -- plaintext, the course schema never hashed it
                role TEXT NOT NULL DEFAULT 'customer'
                    CHECK (role IN ('customer', 'driver', 'manager')),
                favoriteItems TEXT,
                phoneNum TEXT
            ) STRICT;
            CREATE TABLE IF NOT EXISTS Store (
                storeID INTEGER PRIMARY KEY,
                address TEXT NOT NULL,
                city TEXT NOT NULL,
                state TEXT NOT NULL,
                isOpen INTEGER NOT NULL DEFAULT 1,
                reviewScore REAL
            ) STRICT;
            CREATE TABLE IF NOT EXISTS Items (
                itemName TEXT PRIMARY KEY,
                ingredients TEXT NOT NULL,
                typeOfItem TEXT NOT NULL,
                price REAL NOT NULL CHECK (price > 0),
                description TEXT
            ) STRICT;
            CREATE TABLE IF NOT EXISTS FoodOrder (
                orderID INTEGER PRIMARY KEY AUTOINCREMENT,
                login TEXT NOT NULL REFERENCES Users(login) ON UPDATE CASCADE,
                storeID INTEGER NOT NULL REFERENCES Store(storeID),
                orderTimestamp TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                totalPrice REAL NOT NULL DEFAULT 0,
                orderStatus TEXT NOT NULL DEFAULT 'incomplete'
                    CHECK (orderStatus IN ('incomplete', 'complete'))
            ) STRICT;
            CREATE TABLE IF NOT EXISTS ItemsInOrder (
                orderID INTEGER NOT NULL REFERENCES FoodOrder(orderID) ON DELETE CASCADE,
                itemName TEXT NOT NULL REFERENCES Items(itemName) ON UPDATE CASCADE,
                quantity INTEGER NOT NULL CHECK (quantity > 0),
                PRIMARY KEY (orderID, itemName)
            ) STRICT;
            """
        )

    def uses_autoincrement(self, table: str) -> bool:
        """true if the table was declared with AUTOINCREMENT (and so has a sqlite_sequence row)"""
        rows = self.execute_query_and_return_result(
            "SELECT sql FROM sqlite_master WHERE type='table' AND name=?;",
            (table,)
        )
        return bool(rows) and "AUTOINCREMENT" in (rows[0][0] or "").upper()

    def _prime_order_sequence(self):
        """make the first generated order id equal ORDER_ID_BASELINE"""
        # existing databases may declare FoodOrder without AUTOINCREMENT
        if not self.uses_autoincrement("FoodOrder"):
            return
        self.conn.execute(
            """--sql
            INSERT INTO sqlite_sequence(name, seq)
            SELECT 'FoodOrder', ?
            WHERE NOT EXISTS (SELECT 1 FROM sqlite_sequence WHERE name = 'FoodOrder');
            """,
            (ORDER_ID_BASELINE - 1,)
        )

    def _seed(self):
        """seed a default manager, stores and menu once"""
        self.conn.execute(
            """--sql
            INSERT OR IGNORE INTO Users(login, password, role, favoriteItems, phoneNum)
            VALUES (?, ?, ?, NULL, ?);
            """,
            ("admin", "admin", Role.MANAGER.value, "000-000-0000")
        )
        stores = [
            (1, "900 University Ave", "Riverside", "CA", 1, 4.5),
            (2, "3750 Tyler St", "Riverside", "CA", 1, 4.1),
            (3, "12 Main St", "Corona", "CA", 0, 3.8),
            (4, "455 Orange St", "Redlands", "CA", 1, 4.7),
        ]
        self.conn.executemany(
            """--sql
            INSERT OR IGNORE INTO Store(storeID, address, city, state, isOpen, reviewScore)
            VALUES (?, ?, ?, ?, ?, ?);
            """,
            stores
        )
        items = [
            ("Pepperoni Pizza", "dough, tomato sauce, mozzarella, pepperoni", "entree", 14.99, "classic pepperoni"),
            ("Margherita Pizza", "dough, tomato sauce, mozzarella, basil", "entree", 12.99, None),
            ("Veggie Pizza", "dough, tomato sauce, mozzarella, peppers, olives, onion", "entree", 13.49, "loaded with vegetables"),
            ("Garlic Knots", "dough, garlic, butter, parmesan", "sides", 5.49, "six per order"),
            ("Caesar Salad", "romaine, croutons, parmesan, caesar dressing", "sides", 7.25, None),
            ("Cola", "carbonated water, sugar, caramel color", "drinks", 1.99, "20oz bottle"),
            ("Lemonade", "water, lemon juice, sugar", "drinks", 2.49, None),
        ]
        self.conn.executemany(
            """--sql
            INSERT OR IGNORE INTO Items(itemName, ingredients, typeOfItem, price, description)
            VALUES (?, ?, ?, ?, ?);
            """,
            items
        )

    # query helpers: one fresh cursor per call, released before returning
    def execute_update(self, sql: str, params: Sequence = ()):
        """run a mutating statement"""
        with closing(self.conn.cursor()) as cur:
            cur.execute(sql, params)

    def execute_insert(self, sql: str, params: Sequence = ()) -> int:
        """run an insert and return the rowid the database generated for it"""
        with closing(self.conn.cursor()) as cur:
            cur.execute(sql, params)
            return cur.lastrowid

    def execute_query_and_return_result(self, sql: str, params: Sequence = ()) -> list[list[str | None]]:
        """run a query; each record is a list of column values as text (none for null)"""
        with closing(self.conn.cursor()) as cur:
            cur.execute(sql, params)
            return [[None if v is None else str(v) for v in row] for row in cur.fetchall()]

    def execute_query(self, sql: str, params: Sequence = ()) -> int:
        """run a query and return only the number of matched rows"""
        with closing(self.conn.cursor()) as cur:
            cur.execute(sql, params)
            return len(cur.fetchall())

    def execute_query_and_print_result(self, sql: str, params: Sequence = ()) -> int:
        """run a query, print a tab separated table and return the row count"""
        with closing(self.conn.cursor()) as cur:
            cur.execute(sql, params)
            rows = cur.fetchall()
            if rows:
                cprint("\t".join(d[0] for d in cur.description), attrs=["bold"])
            for row in rows:
                print("\t".join(str(v) for v in row))
            return len(rows)

    def current_sequence_value(self, table: str) -> int:
        """current value of the table's autoincrement sequence (-1 if none yet)"""
        if not self.uses_autoincrement(table):
            return -1
        rows = self.execute_query_and_return_result(
            "SELECT seq FROM sqlite_sequence WHERE name=?;",
            (table,)
        )
        return int(rows[0][0]) if rows else -1

    @contextmanager
    def transaction(self):
        """run the enclosed statements atomically; any exception rolls back"""
        self.conn.execute("BEGIN;")
        try:
            yield self
        except BaseException:
            self.conn.execute("ROLLBACK;")
            raise
        self.conn.execute("COMMIT;")

    def close(self):
        """release the connection (safe to call more than once)"""
        if self.conn is not None:
            self.conn.close()
            self.conn = None

# session
class Role(Enum):
    CUSTOMER = "customer"
    DRIVER = "driver"
    MANAGER = "manager"

    @classmethod
    def names(cls) -> list[str]:
        return [r.value for r in cls]

@dataclass
class Session:
    """the logged-in user; empty login/role means logged out"""
    login: str = ""
    role: str = ""

    def reset(self):
        self.login = ""
        self.role = ""

    @property
    def logged_in(self) -> bool:
        return bool(self.login)

    @property
    def is_staff(self) -> bool:
        """drivers and managers"""
        return self.role in (Role.DRIVER.value, Role.MANAGER.value)

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER.value

# accounts
class AccountManager:
    """registration, login and user record updates (plain text passwords, see DESIGN.md)"""
    # column per editable field; keys are menu numbers
    PROFILE_FIELDS = {1: ("password", "password"), 2: ("phoneNum", "phone number"), 3: ("favoriteItems", "favorite items")}
    ADMIN_FIELDS = {1: ("password", "password"), 2: ("role", "role"), 3: ("favoriteItems", "favorite items"), 4: ("phoneNum", "phone number")}

    def __init__(self, db: DatabaseManager):
        self.db = db

    def user_exists(self, login: str) -> bool:
        return self.db.execute_query("SELECT 1 FROM Users WHERE login=?;", (login,)) > 0

    def create_user(self) -> bool:
        """self-registration; new accounts are always customers"""
        header("create user")
        login = prompt("enter your login: ")
        password = prompt("enter your password: ")
        phone = prompt("enter your phone number: ")
        if not login or not password:
            cprint("login and password are required", "red"); return False
        if self.user_exists(login):
            cprint("login already taken", "red"); return False
        self.db.execute_update(
            "INSERT INTO Users(login, password, role, favoriteItems, phoneNum) VALUES (?, ?, ?, NULL, ?);",
            (login, password, Role.CUSTOMER.value, phone)
        )
        cprint("user created successfully!", "green")
        return True

    def login(self, session: Session) -> bool:
        """check credentials (whitespace-insensitive) and fill the session"""
        header("login")
        login = prompt("enter your login: ")
        password = prompt("enter your password: ")
        rows = self.db.execute_query_and_return_result(
            "SELECT login, role FROM Users WHERE TRIM(login) = TRIM(?) AND TRIM(password) = TRIM(?);",
            (login, password)
        )
        if not rows:
            cprint("invalid login or password, please try again.", "red")
            return False
        session.login = rows[0][0]
        session.role = rows[0][1].strip()
        cprint(f"login successful! welcome, {colored(session.login.strip(), 'yellow', attrs=['bold'])}", "green")
        print(f"your role is: {session.role}")
        return True

    def logout(self, session: Session):
        cprint(f"logged out {session.login}", "green")
        session.reset()

    def fetch_profile(self, login: str) -> list[str | None] | None:
        rows = self.db.execute_query_and_return_result(
            "SELECT login, role, phoneNum, favoriteItems FROM Users WHERE login=?;",
            (login,)
        )
        return rows[0] if rows else None

    def view_profile(self, session: Session):
        profile = self.fetch_profile(session.login)
        if profile is None:
            cprint(f"no profile found for {session.login}", "red"); return
        header("user profile")
        print("login:", profile[0])
        print("role:", profile[1])
        print("phone number:", profile[2] or "none")
        print("favorite items:", profile[3] or "none")

    def _set_field(self, login: str, column: str, value: str | None):
        """update one column of a user row; column comes from the field tables above"""
        self.db.execute_update(f"UPDATE Users SET {column}=? WHERE login=?;", (value, login))

    def update_profile(self, session: Session):
        """let the logged-in user change their own password / phone / favorites"""
        while True:
            header("update profile")
            print("0. view profile")
            print("1. update password")
            print("2. update phone number")
            print("3. update favorite items")
            print(".........................")
            print("4. go back")
            choice = read_choice()
            if choice == 0:
                self.view_profile(session)
            elif choice in self.PROFILE_FIELDS:
                column, label = self.PROFILE_FIELDS[choice]
                value = prompt(f"enter new {label}: ")
                if column == "password" and not value:
                    cprint("password cannot be empty", "red"); continue
                self._set_field(session.login, column, value or None)
                cprint(f"{label} updated successfully!", "green")
            elif choice == 4:
                return
            else:
                cprint("unrecognized choice!", "red")

    def _select_user(self) -> str:
        """re-prompt until an existing login is given"""
        while True:
            login = prompt("enter the login of the user to update: ")
            if self.user_exists(login):
                return login
            cprint(f"no user with login '{login}'", "red")

    def update_user(self, session: Session):
        """manager-only editing of any user record"""
        header("users")
        self.db.execute_query_and_print_result(
            "SELECT login, role, phoneNum, favoriteItems FROM Users ORDER BY login;"
        )
        target = self._select_user()
        while True:
            header(f"update user {target}")
            print("1. update password")
            print("2. update role")
            print("3. update favorite items")
            print("4. update phone number")
            print("5. switch user")
            print(".........................")
            print("6. go back")
            choice = read_choice()
            if choice in self.ADMIN_FIELDS:
                column, label = self.ADMIN_FIELDS[choice]
                hint = f" ({'/'.join(Role.names())})" if column == "role" else ""
                value = prompt(f"enter new {label}{hint}: ")
                if column == "role":
                    value = value.lower()
                    if value not in Role.names():
                        cprint("invalid role", "red"); continue
                elif column == "password" and not value:
                    cprint("password cannot be empty", "red"); continue
                self._set_field(target, column, value or None)
                cprint(f"{label} of {target} updated", "green")
                if column == "role" and target == session.login:
                    session.role = value
                    if not session.is_manager:
                        cprint("you are no longer a manager, leaving user administration", "yellow")
                        return
            elif choice == 5:
                target = self._select_user()
            elif choice == 6:
                return
            else:
                cprint("unrecognized choice!", "red")

# menu browsing / administration
ITEM_COLUMNS = "itemName, ingredients, typeOfItem, price, description"

@dataclass
class MenuFilters:
    """filters that persist across views within one menu visit"""
    item_type: str = ""
    max_price: float | None = None
    sort: str = ""

    def reset(self):
        self.item_type = ""
        self.max_price = None
        self.sort = ""

    def build_query(self) -> tuple[str, list]:
        """derive the select; an unset filter adds no constraint"""
        sql = f"SELECT {ITEM_COLUMNS} FROM Items"
        clauses, params = [], []
        if self.item_type:
            clauses.append("typeOfItem = ?")
            params.append(self.item_type)
        if self.max_price is not None:
            clauses.append("price <= ?")
            params.append(self.max_price)
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        if self.sort:
            sql += f" ORDER BY price {self.sort}"
        return sql + ";", params

    def describe(self):
        print("type:", self.item_type or "any")
        print("max price:", "any" if self.max_price is None else f"${self.max_price:.2f}")
        print("sort:", {"ASC": "lowest to highest", "DESC": "highest to lowest"}.get(self.sort, "none"))

class MenuManager:
    """item catalog, filtered browsing and manager item edits"""
    ITEM_FIELDS = {1: ("ingredients", "ingredients"), 2: ("typeOfItem", "type"), 3: ("price", "price"), 4: ("description", "description")}

    def __init__(self, db: DatabaseManager):
        self.db = db

    def get_item(self, name: str, exact: bool = True) -> list[str | None] | None:
        """lookup an item by exact (or case-insensitive) name"""
        where = "itemName = ?" if exact else "lower(itemName) = lower(?)"
        rows = self.db.execute_query_and_return_result(
            f"SELECT {ITEM_COLUMNS} FROM Items WHERE {where};",
            (name,)
        )
        return rows[0] if rows else None

    def catalog(self) -> list[list[str | None]]:
        return self.db.execute_query_and_return_result(
            f"SELECT {ITEM_COLUMNS} FROM Items ORDER BY typeOfItem, itemName;"
        )

    def print_catalog(self):
        """print every item grouped by type"""
        items = self.catalog()
        if not items:
            cprint("menu empty", "red"); return
        current_type = None
        for name, _, item_type, price, _ in items:
            if item_type != current_type:
                current_type = item_type
                cprint(f"\n{item_type}:", "green", attrs=["bold"])
            print(f"  {name}: {color_money(float(price))}")

    @staticmethod
    def print_item(item: Sequence[str | None]):
        name, ingredients, item_type, price, description = item
        cprint(f"item: {name}", attrs=["bold"])
        print("ingredients:", ingredients)
        print("type:", item_type)
        print("price:", color_money(float(price)))
        print("description:", description or "no description available.")
        print("-----------")

    def view_menu(self, session: Session | None = None):
        """browse items with type / max price / sort filters"""
        filters = MenuFilters()
        while True:
            header("store menu")
            filters.describe()
            print()
            print("0. view items (w/ filters)")
            print("1. filter by type")
            print("2. filter by price (maximum)")
            print("3. sort by price (lowest to highest)")
            print("4. sort by price (highest to lowest)")
            print("5. reset all filters")
            print(".........................")
            print("6. go back")
            choice = read_choice()
            if choice == 0:
                sql, params = filters.build_query()
                rows = self.db.execute_query_and_return_result(sql, params)
                if not rows:
                    cprint("no items match the current filters.", "yellow")
                for row in rows:
                    self.print_item(row)
            elif choice == 1:
                filters.item_type = prompt("enter type to filter (e.g. 'drinks', 'sides'): ")
                cprint(f"filter set to type: {filters.item_type or 'any'}", "green")
            elif choice == 2:
                price = safe_float(prompt("enter maximum price (e.g. 10.00): "))
                if price is None:
                    cprint("invalid price, filter unchanged", "red"); continue
                filters.max_price = price
                cprint(f"filter set to price: {color_money(price)}", "green")
            elif choice == 3:
                filters.sort = "ASC"
                cprint("sorting by price: lowest to highest", "green")
            elif choice == 4:
                filters.sort = "DESC"
                cprint("sorting by price: highest to lowest", "green")
            elif choice == 5:
                filters.reset()
                cprint("filters reset.", "green")
            elif choice == 6:
                return
            else:
                cprint("unrecognized choice!", "red")

    def update_menu(self, session: Session):
        """manager menu for editing or adding items"""
        while True:
            header("update menu")
            print("1. update existing item")
            print("2. add new item")
            print(".........................")
            print("3. go back")
            choice = read_choice()
            if choice == 1:
                self.update_item()
            elif choice == 2:
                self.add_item()
            elif choice == 3:
                return
            else:
                cprint("unrecognized choice!", "red")

    def update_item(self) -> bool:
        """change exactly one attribute of an existing item"""
        name = prompt("name of the item to update: ")
        item = self.get_item(name)
        if item is None:
            cprint(f"item '{name}' not found", "red"); return False
        self.print_item(item)
        print("1. ingredients")
        print("2. type")
        print("3. price")
        print("4. description")
        choice = read_choice()
        if choice not in self.ITEM_FIELDS:
            cprint("unrecognized choice, nothing changed", "red"); return False
        column, label = self.ITEM_FIELDS[choice]
        value = prompt(f"enter new {label}: ")
        if column == "description" and not value:
            value = None
        try:
            self.db.execute_update(
                f"UPDATE Items SET {column}=? WHERE itemName=?;",
                (value, name)
            )
        except sqlite3.Error as e:
            error(f"could not update {label}: {e}"); return False
        cprint(f"{label} of {name} updated", "green")
        return True

    def add_item(self) -> bool:
        """insert a new item; an existing name is left untouched"""
        name = prompt("new item name: ")
        if not name:
            cprint("item name is required", "red"); return False
        if self.get_item(name) is not None:
            cprint(f"item '{name}' already exists", "red"); return False
        ingredients = prompt("ingredients: ")
        item_type = prompt("type of item: ")
        price = prompt("price: ")
        description = prompt("description (optional): ")
        try:
            self.db.execute_update(
                f"INSERT INTO Items({ITEM_COLUMNS}) VALUES (?, ?, ?, ?, ?);",
                (name, ingredients, item_type, price, description or None)
            )
        except sqlite3.Error as e:
            error(f"could not add item: {e}"); return False
        cprint(f"{name} added to the menu", "green")
        return True

# orders
class OrderStatus(Enum):
    INCOMPLETE = "incomplete"
    COMPLETE = "complete"

STORE_COLUMNS = "storeID, address, city, state, isOpen, reviewScore"

class OrderManager:
    """stores, order placement and order reports"""
    def __init__(self, db: DatabaseManager, menu_manager: MenuManager):
        self.db = db
        self.menu_manager = menu_manager

    # stores
    def fetch_stores(self) -> list[list[str | None]]:
        """all stores, open first"""
        return self.db.execute_query_and_return_result(
            f"SELECT {STORE_COLUMNS} FROM Store ORDER BY isOpen DESC, storeID;"
        )

    @staticmethod
    def print_stores(stores: Sequence[Sequence[str | None]]):
        header("available stores")
        for store_id, address, city, state, is_open, score in stores:
            status = colored("OPEN", "green") if is_open == "1" else colored("CLOSED", "red")
            print(f"store #{store_id}: {address}, {city}, {state} | review score {score or 'n/a'} | {status}")

    def view_stores(self, session: Session | None = None):
        stores = self.fetch_stores()
        if not stores:
            cprint("no stores available.", "red"); return
        self.print_stores(stores)

    # placement
    def place_order(self, session: Session) -> int | None:
        """select an open store, collect line items, then commit or discard the order"""
        stores = self.fetch_stores()
        open_ids = {row[0] for row in stores if row[4] == "1"}
        if not open_ids:
            cprint("no stores are open right now, try again later.", "red"); return None
        self.print_stores(stores)
        store_id = read_int("enter the id of an open store: ")
        if str(store_id) not in open_ids:
            cprint(f"store #{store_id} is not open or does not exist, order cancelled", "red")
            return None
        try:
            with self.db.transaction():
                order_id, total, lines = self._collect_order(session, store_id)
        except EmptyOrderError as e:
            cprint(f"no items added, order #{e.order_id} discarded", "yellow")
            return None
        except sqlite3.Error as e:
            error(f"order failed, nothing was saved: {e}")
            return None
        header(f"order #{order_id} placed")
        for name, qty, subtotal in lines:
            print(f"{qty} x {name}: {color_money(subtotal)}")
        print(f"store: #{store_id}")
        print(f"total: {color_money(total)}")
        return order_id

    def _collect_order(self, session: Session, store_id: int) -> tuple[int, float, list]:
        """runs inside the order transaction; raises EmptyOrderError if nothing was added"""
        order_id = self.db.execute_insert(
            """--sql
            INSERT INTO FoodOrder(login, storeID, orderTimestamp, totalPrice, orderStatus)
            VALUES (?, ?, ?, 0, ?);
            """,
            (session.login, store_id, timestamp(), OrderStatus.INCOMPLETE.value)
        )
        total = 0.0
        lines = []
        while True:
            self.menu_manager.print_catalog()
            name = prompt(f"\nitem to add (or '{DONE_KEYWORD}' to finish): ")
            if name.lower() == DONE_KEYWORD:
                break
            item = self.menu_manager.get_item(name, exact=False)
            if item is None:
                cprint(f"'{name}' is not on the menu, try again", "red"); continue
            item_name, price = item[0], float(item[3])
            qty = read_int(f"quantity of {item_name}: ", minimum=1)
            # no upsert: an existing ItemsInOrder may lack the (orderID, itemName) key
            if self.db.execute_query(
                "SELECT 1 FROM ItemsInOrder WHERE orderID=? AND itemName=?;",
                (order_id, item_name)
            ):
                self.db.execute_update(
                    "UPDATE ItemsInOrder SET quantity = quantity + ? WHERE orderID=? AND itemName=?;",
                    (qty, order_id, item_name)
                )
            else:
                self.db.execute_update(
                    "INSERT INTO ItemsInOrder(orderID, itemName, quantity) VALUES (?, ?, ?);",
                    (order_id, item_name, qty)
                )
            total += qty * price
            lines.append((item_name, qty, qty * price))
            cprint(f"added {qty} x {item_name} (running total {color_money(total)})", "green")
        if total <= 0:
            raise EmptyOrderError(order_id)
        total = round(total, 2)
        self.db.execute_update(
            "UPDATE FoodOrder SET totalPrice=? WHERE orderID=?;",
            (total, order_id)
        )
        return order_id, total, lines

    # reports
    def fetch_order_history(self, session: Session, limit: int | None = None) -> list[list[str | None]]:
        """customers see their own orders; staff see all orders plus the owner"""
        if session.is_staff:
            sql = "SELECT orderID, login, storeID, orderTimestamp, totalPrice, orderStatus FROM FoodOrder"
            params: list = []
        else:
            sql = "SELECT orderID, storeID, orderTimestamp, totalPrice, orderStatus FROM FoodOrder WHERE login=?"
            params = [session.login]
        sql += " ORDER BY orderTimestamp DESC, orderID DESC"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)
        return self.db.execute_query_and_return_result(sql + ";", params)

    @staticmethod
    def print_history(session: Session, rows: Sequence[Sequence[str | None]]):
        if not rows:
            cprint("no orders found", "yellow"); return
        for row in rows:
            if session.is_staff:
                order_id, login, store_id, ts, total, status = row
                owner = f" by {login}"
            else:
                order_id, store_id, ts, total, status = row
                owner = ""
            print(f"order #{order_id}{owner} | store #{store_id} | {ts} | {color_money(float(total))} | {status}")

    def view_all_orders(self, session: Session):
        header("order history")
        self.print_history(session, self.fetch_order_history(session))

    def view_recent_orders(self, session: Session):
        header(f"last {RECENT_ORDER_LIMIT} orders")
        self.print_history(session, self.fetch_order_history(session, RECENT_ORDER_LIMIT))

    def can_view_order(self, session: Session, order_id: int) -> bool:
        """existence + ownership for customers, existence only for staff"""
        if session.is_staff:
            return self.db.execute_query("SELECT 1 FROM FoodOrder WHERE orderID=?;", (order_id,)) > 0
        return self.db.execute_query(
            "SELECT 1 FROM FoodOrder WHERE orderID=? AND login=?;",
            (order_id, session.login)
        ) > 0

    def fetch_order_detail(self, order_id: int):
        """return (header row, line rows with subtotal, recomputed total)"""
        order = self.db.execute_query_and_return_result(
            "SELECT orderID, login, storeID, orderTimestamp, totalPrice, orderStatus FROM FoodOrder WHERE orderID=?;",
            (order_id,)
        )
        lines = self.db.execute_query_and_return_result(
            """--sql
            SELECT io.itemName, io.quantity, i.price, io.quantity * i.price AS subtotal
            FROM ItemsInOrder io
            JOIN Items i ON i.itemName = io.itemName
            WHERE io.orderID = ?
            ORDER BY io.itemName;
            """,
            (order_id,)
        )
        recomputed = round(sum(float(line[3]) for line in lines), 2)
        return (order[0] if order else None), lines, recomputed

    def view_order_info(self, session: Session):
        order_id = read_int("enter order id: ")
        if not self.can_view_order(session, order_id):
            cprint(f"order #{order_id} not found", "red"); return
        order, lines, recomputed = self.fetch_order_detail(order_id)
        _, login, store_id, ts, total, status = order
        header(f"order #{order_id}")
        print("customer:", login)
        print("store:", f"#{store_id}")
        print("placed:", ts)
        print("status:", status)
        print("items:")
        for name, qty, price, subtotal in lines:
            print(f"  {qty} x {name} @ {color_money(float(price))} = {color_money(float(subtotal))}")
        print("stored total:", color_money(float(total)))
        print("current item total:", color_money(recomputed))
        if abs(recomputed - float(total)) >= 0.005:
            cprint("note: item prices changed since this order was placed", "yellow")

    def update_order_status(self, session: Session):
        """drivers and managers mark orders complete / incomplete"""
        order_id = read_int("enter order id: ")
        if self.db.execute_query("SELECT 1 FROM FoodOrder WHERE orderID=?;", (order_id,)) == 0:
            cprint(f"order #{order_id} not found", "red"); return
        print(f"1. {OrderStatus.COMPLETE.value}")
        print(f"2. {OrderStatus.INCOMPLETE.value}")
        choice = read_choice()
        statuses = {1: OrderStatus.COMPLETE, 2: OrderStatus.INCOMPLETE}
        if choice not in statuses:
            cprint("unrecognized choice, status unchanged", "red"); return
        self.db.execute_update(
            "UPDATE FoodOrder SET orderStatus=? WHERE orderID=?;",
            (statuses[choice].value, order_id)
        )
        cprint(f"order #{order_id} marked {statuses[choice].value}", "green")

# menu infrastructure
STAFF = (Role.DRIVER, Role.MANAGER)
MANAGERS = (Role.MANAGER,)

class MenuOption:
    """bind a menu number to a workflow taking the session"""
    def __init__(self, number: int, label: str, function: Callable[[Session], object],
                 roles: Sequence[Role] | None = None):
        self.number = number
        self.label = label
        self._fn = function
        self.roles = roles

    def visible_to(self, session: Session) -> bool:
        return self.roles is None or session.role in (r.value for r in self.roles)

    def execute(self, session: Session):
        """run the workflow; database errors abort it and return to the menu"""
        try:
            return self._fn(session)
        except sqlite3.Error as e:
            error(f"{self.label.lower()} failed: {e}")

class MenuScreen:
    """numbered menu; options are shown / allowed per session role"""
    def __init__(self, title: str, options: list[MenuOption], separator_before: int | None = None):
        self.title = title
        self.options = options
        self.separator_before = separator_before

    def show(self, session: Session):
        header(self.title)
        for option in self.options:
            if not option.visible_to(session):
                continue
            if option.number == self.separator_before:
                print(".........................")
            print(f"{option.number}. {option.label}")

    def dispatch(self, choice: int, session: Session):
        option = next((o for o in self.options if o.number == choice), None)
        if option is None:
            cprint("unrecognized choice!", "red"); return
        if not option.visible_to(session):
            cprint("unauthorized access!", "red"); return
        return option.execute(session)

    def run_once(self, session: Session):
        self.show(session)
        return self.dispatch(read_choice(), session)

# application wiring
class Application:
    """bootstrap objects & run the menu loops"""
    def __init__(self, dbname: str, port: str, user: str):
        cprint("""
*******************************************************
              pizza store user interface
*******************************************************
""", "green", attrs=["bold"])
        path = database_path(dbname)
        print(f"connecting to database... (sqlite:///{path}, port {port}, user {user})")
        try:
            self.db = DatabaseManager(path)
        except sqlite3.Error as e:
            error(f"error - unable to connect to database: {e}")
            sys.exit(-1)
        atexit.register(self.db.close)
        cprint("done", "green")

        self.session = Session()
        self.accounts = AccountManager(self.db)
        self.menu = MenuManager(self.db)
        self.orders = OrderManager(self.db, self.menu)
        self.running = True

        self.main_menu = MenuScreen("main menu", [
            MenuOption(1, "create user", lambda _: self.accounts.create_user()),
            MenuOption(2, "log in", self.accounts.login),
            MenuOption(9, "< exit", self.exit),
        ])
        self.user_menu = MenuScreen("main menu", [
            MenuOption(1, "view profile", self.accounts.view_profile),
            MenuOption(2, "update profile", self.accounts.update_profile),
            MenuOption(3, "view menu", self.menu.view_menu),
            MenuOption(4, "place order", self.orders.place_order),
            MenuOption(5, "view full order id history", self.orders.view_all_orders),
            MenuOption(6, f"view past {RECENT_ORDER_LIMIT} order ids", self.orders.view_recent_orders),
            MenuOption(7, "view order information", self.orders.view_order_info),
            MenuOption(8, "view stores", self.orders.view_stores),
            MenuOption(9, "update order status", self.orders.update_order_status, STAFF),
            MenuOption(10, "update menu", self.menu.update_menu, MANAGERS),
            MenuOption(11, "update user", self.accounts.update_user, MANAGERS),
            MenuOption(20, "log out", self.accounts.logout),
        ], separator_before=20)

    def exit(self, _session: Session):
        self.running = False

    def run(self):
        """top-level loop until exit (9) or end of input"""
        try:
            while self.running:
                self.main_menu.run_once(self.session)
                while self.session.logged_in:
                    self.user_menu.run_once(self.session)
        except EOFError:
            print()
        finally:
            self.shutdown()

    def shutdown(self):
        print("disconnecting from database...", end="")
        self.db.close()
        cprint("done\n\nbye!", "green")

# entry point
def main(argv: Sequence[str] | None = None):
    """entrypoint wrapper"""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 3:
        error(USAGE)
        sys.exit(1)
    signal.signal(signal.SIGINT, SignalHandler.sigint)
    Application(*args).run()

# signal handler
class SignalHandler:
    """ctrl+c exits cleanly; atexit still closes the connection"""
    @staticmethod
    def sigint(_, __):
        cprint("\nnext time, use 9 to exit!", "yellow")
        sys.exit(0)

if __name__ == "__main__":
    main()
