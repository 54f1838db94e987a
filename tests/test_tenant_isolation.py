"""
Cross-restaurant isolation tests.

Two restaurants with overlapping data must never see or modify each
other's rows, whether through admin endpoints or the public menu.
"""

import pytest

from app.core.exceptions import ForbiddenException
from app.models import MenuCategory, MenuItem
from app.repositories.category_repository import CategoryRepository


@pytest.fixture
def both_menus(db_session, tenant_a, tenant_b):
    """Each restaurant owns a 'Beverages' category with one item"""
    rows = {}
    for key, tenant, item_name in (("a", tenant_a, "Latte"), ("b", tenant_b, "Horchata")):
        category = MenuCategory(tenant_id=tenant.id, name="Beverages", position=0)
        db_session.add(category)
        db_session.flush()
        item = MenuItem(tenant_id=tenant.id, category_id=category.id, name=item_name, price=50)
        db_session.add(item)
        db_session.flush()
        rows[key] = {"category": category, "item": item}
    db_session.commit()
    return rows


class TestAdminIsolation:
    """Admin endpoints only ever see the bound restaurant's rows"""

    def test_overlapping_names_listed_per_tenant(self, client, both_menus, admin_a_headers, admin_b_headers):
        a = client.get("/api/admin/categories/", headers=admin_a_headers).json()
        b = client.get("/api/admin/categories/", headers=admin_b_headers).json()

        assert [c["id"] for c in a["categories"]] == [both_menus["a"]["category"].id]
        assert [c["id"] for c in b["categories"]] == [both_menus["b"]["category"].id]

    def test_cannot_read_other_tenant_category(self, client, both_menus, admin_a_headers):
        foreign_id = both_menus["b"]["category"].id

        response = client.get(f"/api/admin/categories/{foreign_id}", headers=admin_a_headers)

        assert response.status_code == 404

    def test_cannot_update_other_tenant_item(self, client, db_session, both_menus, admin_a_headers):
        foreign = both_menus["b"]["item"]

        response = client.patch(
            f"/api/admin/menu-items/{foreign.id}", json={"price": 1}, headers=admin_a_headers
        )

        assert response.status_code == 404
        db_session.refresh(foreign)
        assert float(foreign.price) == 50.0

    def test_cannot_delete_other_tenant_category(self, client, db_session, both_menus, admin_a_headers):
        foreign_id = both_menus["b"]["category"].id

        response = client.delete(f"/api/admin/categories/{foreign_id}", headers=admin_a_headers)

        assert response.status_code == 404
        assert db_session.get(MenuCategory, foreign_id) is not None

    def test_cannot_create_item_in_other_tenant_category(self, client, both_menus, admin_a_headers):
        response = client.post(
            "/api/admin/menu-items/",
            json={"category_id": both_menus["b"]["category"].id, "name": "Spy", "price": 1},
            headers=admin_a_headers,
        )

        assert response.status_code == 404

    def test_reorder_ignores_foreign_ids(self, client, db_session, both_menus, admin_a_headers):
        own = both_menus["a"]["category"]
        foreign = both_menus["b"]["category"]

        response = client.put(
            "/api/admin/categories/reorder",
            json={"ordered_ids": [foreign.id, own.id]},
            headers=admin_a_headers,
        )

        assert response.status_code == 200
        assert [c["id"] for c in response.json()["categories"]] == [own.id]
        db_session.refresh(foreign)
        assert foreign.position == 0


class TestScopedRepository:
    """Tests for repository-level tenant scoping"""

    def test_repository_requires_tenant(self, db_session):
        with pytest.raises(ForbiddenException):
            CategoryRepository(db_session, None)

    def test_get_by_id_filters_tenant(self, db_session, both_menus, tenant_a):
        repo = CategoryRepository(db_session, tenant_a.id)

        assert repo.get_by_id(both_menus["b"]["category"].id) is None
        assert repo.get_by_id(both_menus["a"]["category"].id) is not None

    def test_add_stamps_bound_tenant(self, db_session, tenant_a, tenant_b):
        repo = CategoryRepository(db_session, tenant_a.id)
        category = repo.create(MenuCategory(tenant_id=tenant_b.id, name="Sneaky"))

        assert category.tenant_id == tenant_a.id


class TestPublicIsolation:
    """The public menu only shows the host's restaurant"""

    def test_menu_shows_only_host_items(self, client, both_menus):
        a = client.get("/api/menu", headers={"host": "elysium.platform.com"}).json()
        b = client.get("/api/menu", headers={"host": "bistro.platform.com"}).json()

        assert [i["name"] for c in a["categories"] for i in c["items"]] == ["Latte"]
        assert [i["name"] for c in b["categories"] for i in c["items"]] == ["Horchata"]

    def test_foreign_category_not_found_on_public_menu(self, client, both_menus):
        foreign_id = both_menus["b"]["category"].id

        response = client.get(
            f"/api/menu/categories/{foreign_id}", headers={"host": "elysium.platform.com"}
        )

        assert response.status_code == 404

    def test_order_cannot_reference_foreign_item(self, client, both_menus, notifier):
        response = client.post(
            "/api/menu/orders",
            json={"table_number": "4", "items": [{"menu_item_id": both_menus["b"]["item"].id}]},
            headers={"host": "elysium.platform.com"},
        )

        assert response.status_code == 400
        assert notifier.messages == []
