import pytest

from magia_interna.constants import ANONYMOUS_CUSTOMER_NAME
from magia_interna.database.repositories.customers_repo import CustomersRepo
from magia_interna.database.repositories.errors import DomainError


def test_create_normalizes_blank_fields(conn):
    repo = CustomersRepo(conn)
    cid = repo.create({"name": " Marta ", "email": "  ", "phone": "300 123 4567"})
    c = repo.get(cid)
    assert c.name == "Marta"
    assert c.email is None
    assert c.phone == "300 123 4567"
    assert c.customer_type == "regular"


@pytest.mark.parametrize(
    "data",
    [
        {"name": ""},
        {"name": "y" * 61},
        {"name": "Ok", "customer_type": "gold"},
        {"name": "Ok", "document_type": "DNI"},
    ],
)
def test_invalid_customers_are_rejected(conn, data):
    with pytest.raises(DomainError):
        CustomersRepo(conn).create(data)


def test_search_by_name_or_email(conn, ids):
    repo = CustomersRepo(conn)
    assert [c.name for c in repo.list_customers("gómez")] == ["Ana Gómez"]
    assert [c.name for c in repo.list_customers("luis@")] == ["Luis Pérez"]


def test_inactive_customers_hidden_unless_requested(conn, ids):
    repo = CustomersRepo(conn)
    data = {"name": "Luis Pérez", "email": "luis@example.com", "is_active": 0}
    repo.update(ids["luis"], data)
    assert [c.name for c in repo.list_customers()] == ["Ana Gómez"]
    assert len(repo.list_customers(active_only=False)) == 2


def test_anonymous_customer_is_created_once(conn):
    repo = CustomersRepo(conn)
    first = repo.ensure_anonymous()
    second = repo.ensure_anonymous()
    assert first == second
    assert repo.get(first).name == ANONYMOUS_CUSTOMER_NAME
    assert repo.get(first).is_anonymous
    assert repo.list_customers() == []
    assert len(repo.list_customers(include_anonymous=True)) == 1


def test_anonymous_customer_is_reactivated(conn):
    repo = CustomersRepo(conn)
    cid = repo.ensure_anonymous()
    conn.execute("UPDATE customers SET is_active=0 WHERE customer_id=?", (cid,))
    conn.commit()
    assert repo.ensure_anonymous() == cid
    assert repo.get(cid).is_active == 1


def test_birthday_and_email_lists(conn, ids):
    repo = CustomersRepo(conn)
    repo.ensure_anonymous()
    assert [c.name for c in repo.with_birth_date()] == ["Ana Gómez"]
    assert [c.name for c in repo.with_email()] == ["Ana Gómez", "Luis Pérez"]


def test_counts_exclude_anonymous(conn, ids):
    repo = CustomersRepo(conn)
    repo.ensure_anonymous()
    assert repo.count_active() == 2
    assert repo.count_by_type() == {"regular": 1, "vip": 1}


def test_customer_with_sales_cannot_be_deleted(conn, ids, make_sale):
    make_sale([(ids["blusa"], 1, 50000)], ids["ana"])
    repo = CustomersRepo(conn)
    with pytest.raises(DomainError):
        repo.delete(ids["ana"])
    repo.delete(ids["luis"])
    assert repo.get(ids["luis"]) is None
