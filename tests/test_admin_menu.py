from app.models import MenuCategory
from app.models.tenant import SubscriptionTier
from app.services.menu_qr import menu_qr_png
from app.services.onboarding_service import menu_url_for
from tests.conftest import make_tenant, make_admin, auth_headers_for


def create_category(client, headers, name="Beverages", **fields):
    response = client.post("/api/admin/categories/", json={"name": name, **fields}, headers=headers)
    assert response.status_code == 201
    return response.json()


def create_item(client, headers, category_id, name="Latte", price=55.0, **fields):
    payload = {"category_id": category_id, "name": name, "price": price, **fields}
    response = client.post("/api/admin/menu-items/", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


class TestCategories:
    """Tests for /api/admin/categories"""

    def test_create_category_appends_position(self, client, admin_a_headers, db_session, tenant_a):
        first = create_category(client, admin_a_headers, "Beverages", icon="Coffee")
        second = create_category(client, admin_a_headers, "Food")

        assert first["position"] == 0
        assert first["icon"] == "Coffee"
        assert second["position"] == 1
        assert second["icon"] == "UtensilsCrossed"

        db_session.refresh(tenant_a)
        assert tenant_a.total_categories == 2

    def test_list_categories(self, client, admin_a_headers):
        create_category(client, admin_a_headers, "Beverages")
        create_category(client, admin_a_headers, "Food")

        response = client.get("/api/admin/categories/", headers=admin_a_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [c["name"] for c in data["categories"]] == ["Beverages", "Food"]

    def test_update_category(self, client, admin_a_headers):
        category = create_category(client, admin_a_headers)

        response = client.patch(
            f"/api/admin/categories/{category['id']}",
            json={"name": "Drinks", "is_active": False},
            headers=admin_a_headers,
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Drinks"
        assert response.json()["is_active"] is False

    def test_reorder_categories(self, client, admin_a_headers):
        a = create_category(client, admin_a_headers, "A")
        b = create_category(client, admin_a_headers, "B")
        c = create_category(client, admin_a_headers, "C")

        response = client.put(
            "/api/admin/categories/reorder",
            json={"ordered_ids": [c["id"], a["id"], b["id"]]},
            headers=admin_a_headers,
        )

        assert response.status_code == 200
        assert [cat["name"] for cat in response.json()["categories"]] == ["C", "A", "B"]

    def test_delete_category_removes_items(self, client, admin_a_headers, db_session, tenant_a):
        category = create_category(client, admin_a_headers)
        create_item(client, admin_a_headers, category["id"])
        create_item(client, admin_a_headers, category["id"], name="Mocha")

        response = client.delete(f"/api/admin/categories/{category['id']}", headers=admin_a_headers)

        assert response.status_code == 204
        assert client.get("/api/admin/menu-items/", headers=admin_a_headers).json()["total"] == 0
        db_session.refresh(tenant_a)
        assert tenant_a.total_categories == 0
        assert tenant_a.total_menu_items == 0

    def test_get_missing_category(self, client, admin_a_headers):
        response = client.get("/api/admin/categories/999", headers=admin_a_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Category not found"

    def test_plan_limit_blocks_create(self, client, db_session):
        """Trial plan allows 10 categories; the 11th is refused"""
        tenant = make_tenant(db_session, "tiny", subscription_tier=SubscriptionTier.TRIAL)
        admin_user = make_admin(db_session, "tiny-admin", tenant)
        for position in range(10):
            db_session.add(MenuCategory(tenant_id=tenant.id, name=f"C{position}", position=position))
        db_session.commit()

        response = client.post(
            "/api/admin/categories/",
            json={"name": "One too many"},
            headers=auth_headers_for(admin_user.id),
        )

        assert response.status_code == 403
        assert "Upgrade your plan" in response.json()["detail"]


class TestMenuItems:
    """Tests for /api/admin/menu-items"""

    def test_create_item_with_variants(self, client, admin_a_headers, db_session, tenant_a):
        category = create_category(client, admin_a_headers)
        item = create_item(
            client,
            admin_a_headers,
            category["id"],
            tags=["hot"],
            variants=[{"name": "medium", "price": 55}, {"name": "large", "price": 65.5}],
        )

        assert item["category_id"] == category["id"]
        assert item["price"] == 55.0
        assert item["tags"] == ["hot"]
        assert item["variants"] == [
            {"name": "medium", "price": 55.0},
            {"name": "large", "price": 65.5},
        ]
        assert item["is_available"] is True
        db_session.refresh(tenant_a)
        assert tenant_a.total_menu_items == 1

    def test_duplicate_variant_names_rejected(self, client, admin_a_headers):
        category = create_category(client, admin_a_headers)
        response = client.post(
            "/api/admin/menu-items/",
            json={
                "category_id": category["id"],
                "name": "Latte",
                "price": 55,
                "variants": [{"name": "medium", "price": 55}, {"name": "medium", "price": 60}],
            },
            headers=admin_a_headers,
        )

        assert response.status_code == 422

    def test_negative_price_rejected(self, client, admin_a_headers):
        category = create_category(client, admin_a_headers)
        response = client.post(
            "/api/admin/menu-items/",
            json={"category_id": category["id"], "name": "Latte", "price": -1},
            headers=admin_a_headers,
        )

        assert response.status_code == 422

    def test_create_in_unknown_category(self, client, admin_a_headers):
        response = client.post(
            "/api/admin/menu-items/",
            json={"category_id": 999, "name": "Latte", "price": 55},
            headers=admin_a_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Category not found"

    def test_list_by_category(self, client, admin_a_headers):
        drinks = create_category(client, admin_a_headers, "Drinks")
        food = create_category(client, admin_a_headers, "Food")
        create_item(client, admin_a_headers, drinks["id"], name="Latte")
        create_item(client, admin_a_headers, food["id"], name="Bagel")

        response = client.get(
            f"/api/admin/menu-items/?category_id={food['id']}", headers=admin_a_headers
        )

        assert response.status_code == 200
        assert [i["name"] for i in response.json()["menu_items"]] == ["Bagel"]

    def test_move_item_to_other_category_appends(self, client, admin_a_headers):
        drinks = create_category(client, admin_a_headers, "Drinks")
        food = create_category(client, admin_a_headers, "Food")
        create_item(client, admin_a_headers, food["id"], name="Bagel")
        latte = create_item(client, admin_a_headers, drinks["id"], name="Latte")

        response = client.patch(
            f"/api/admin/menu-items/{latte['id']}",
            json={"category_id": food["id"], "price": 60},
            headers=admin_a_headers,
        )

        assert response.status_code == 200
        assert response.json()["category_id"] == food["id"]
        assert response.json()["position"] == 1
        assert response.json()["price"] == 60.0

    def test_toggle_availability(self, client, admin_a_headers):
        category = create_category(client, admin_a_headers)
        item = create_item(client, admin_a_headers, category["id"])

        response = client.post(
            f"/api/admin/menu-items/{item['id']}/toggle-availability", headers=admin_a_headers
        )
        assert response.json()["is_available"] is False

        response = client.post(
            f"/api/admin/menu-items/{item['id']}/toggle-availability", headers=admin_a_headers
        )
        assert response.json()["is_available"] is True

    def test_reorder_items(self, client, admin_a_headers):
        category = create_category(client, admin_a_headers)
        latte = create_item(client, admin_a_headers, category["id"], name="Latte")
        mocha = create_item(client, admin_a_headers, category["id"], name="Mocha")

        response = client.put(
            "/api/admin/menu-items/reorder",
            json={"category_id": category["id"], "ordered_ids": [mocha["id"], latte["id"]]},
            headers=admin_a_headers,
        )

        assert response.status_code == 200
        items = response.json()["menu_items"]
        assert [i["name"] for i in items] == ["Mocha", "Latte"]
        assert [i["position"] for i in items] == [0, 1]

    def test_delete_item(self, client, admin_a_headers, db_session, tenant_a):
        category = create_category(client, admin_a_headers)
        item = create_item(client, admin_a_headers, category["id"])

        response = client.delete(f"/api/admin/menu-items/{item['id']}", headers=admin_a_headers)

        assert response.status_code == 204
        missing = client.get(f"/api/admin/menu-items/{item['id']}", headers=admin_a_headers)
        assert missing.status_code == 404
        db_session.refresh(tenant_a)
        assert tenant_a.total_menu_items == 0


class TestModifierGroups:
    """Tests for /api/admin/modifier-groups and item assignment"""

    def create_milk_group(self, client, headers):
        response = client.post(
            "/api/admin/modifier-groups/",
            json={
                "name": "Milk",
                "type": "single",
                "required": True,
                "min_selections": 1,
                "max_selections": 1,
                "options": [
                    {"label": "Whole"},
                    {"label": "Oat", "price_modifier": "10.00"},
                ],
            },
            headers=headers,
        )
        assert response.status_code == 201
        return response.json()

    def test_create_group_with_options(self, client, admin_a_headers):
        group = self.create_milk_group(client, admin_a_headers)

        assert group["type"] == "single"
        assert [o["label"] for o in group["options"]] == ["Whole", "Oat"]
        assert [o["position"] for o in group["options"]] == [0, 1]
        assert group["options"][1]["price_modifier"] == 10.0

    def test_single_group_with_many_selections_rejected(self, client, admin_a_headers):
        response = client.post(
            "/api/admin/modifier-groups/",
            json={"name": "Milk", "type": "single", "max_selections": 2, "options": [{"label": "Oat"}]},
            headers=admin_a_headers,
        )

        assert response.status_code == 422

    def test_update_replaces_options(self, client, admin_a_headers):
        group = self.create_milk_group(client, admin_a_headers)

        response = client.patch(
            f"/api/admin/modifier-groups/{group['id']}",
            json={"name": "Milk type", "options": [{"label": "Almond", "price_modifier": "12.00"}]},
            headers=admin_a_headers,
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Milk type"
        assert [o["label"] for o in response.json()["options"]] == ["Almond"]

    def test_update_with_inconsistent_bounds(self, client, admin_a_headers):
        group = self.create_milk_group(client, admin_a_headers)

        response = client.patch(
            f"/api/admin/modifier-groups/{group['id']}",
            json={"min_selections": 3},
            headers=admin_a_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "min_selections cannot exceed max_selections"

    def test_assign_groups_to_item(self, client, admin_a_headers):
        group = self.create_milk_group(client, admin_a_headers)
        category = create_category(client, admin_a_headers)
        item = create_item(client, admin_a_headers, category["id"])

        response = client.put(
            f"/api/admin/menu-items/{item['id']}/modifier-groups",
            json={"modifier_group_ids": [group["id"]]},
            headers=admin_a_headers,
        )

        assert response.status_code == 200
        assert response.json()["modifier_groups"] == [{"id": group["id"], "name": "Milk"}]

    def test_assign_unknown_group(self, client, admin_a_headers):
        category = create_category(client, admin_a_headers)
        item = create_item(client, admin_a_headers, category["id"])

        response = client.put(
            f"/api/admin/menu-items/{item['id']}/modifier-groups",
            json={"modifier_group_ids": [999]},
            headers=admin_a_headers,
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Modifier group not found"

    def test_delete_group_detaches_from_items(self, client, admin_a_headers):
        group = self.create_milk_group(client, admin_a_headers)
        category = create_category(client, admin_a_headers)
        item = create_item(
            client, admin_a_headers, category["id"], modifier_group_ids=[group["id"]]
        )
        assert len(item["modifier_groups"]) == 1

        response = client.delete(f"/api/admin/modifier-groups/{group['id']}", headers=admin_a_headers)

        assert response.status_code == 204
        refreshed = client.get(f"/api/admin/menu-items/{item['id']}", headers=admin_a_headers)
        assert refreshed.json()["modifier_groups"] == []


class TestPromotions:
    """Tests for /api/admin/promotions"""

    def test_create_and_list(self, client, admin_a_headers):
        response = client.post(
            "/api/admin/promotions/",
            json={
                "image_url": "https://cdn.example.com/2x1.png",
                "title": "2x1 Lattes",
                "start_date": "2026-01-01T00:00:00Z",
                "end_date": "2026-12-31T23:59:59Z",
            },
            headers=admin_a_headers,
        )
        assert response.status_code == 201
        assert response.json()["position"] == 0

        listing = client.get("/api/admin/promotions/", headers=admin_a_headers)
        assert listing.json()["total"] == 1

    def test_end_before_start_rejected(self, client, admin_a_headers):
        response = client.post(
            "/api/admin/promotions/",
            json={
                "image_url": "https://cdn.example.com/2x1.png",
                "start_date": "2026-06-01T00:00:00Z",
                "end_date": "2026-05-01T00:00:00Z",
            },
            headers=admin_a_headers,
        )

        assert response.status_code == 422

    def test_update_end_before_stored_start(self, client, admin_a_headers):
        created = client.post(
            "/api/admin/promotions/",
            json={"image_url": "https://cdn.example.com/a.png", "start_date": "2026-06-01T00:00:00Z"},
            headers=admin_a_headers,
        ).json()

        response = client.patch(
            f"/api/admin/promotions/{created['id']}",
            json={"end_date": "2026-05-01T00:00:00Z"},
            headers=admin_a_headers,
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "end_date must be after start_date"

    def test_link_to_unknown_item(self, client, admin_a_headers):
        response = client.post(
            "/api/admin/promotions/",
            json={"image_url": "https://cdn.example.com/a.png", "link_menu_item_id": 999},
            headers=admin_a_headers,
        )

        assert response.status_code == 404

    def test_delete_promotion(self, client, admin_a_headers):
        created = client.post(
            "/api/admin/promotions/",
            json={"image_url": "https://cdn.example.com/a.png"},
            headers=admin_a_headers,
        ).json()

        response = client.delete(f"/api/admin/promotions/{created['id']}", headers=admin_a_headers)

        assert response.status_code == 204
        assert client.get("/api/admin/promotions/", headers=admin_a_headers).json()["total"] == 0


class TestSettingsAndDashboard:
    """Tests for /api/admin/settings and /api/admin/dashboard"""

    def test_get_settings(self, client, admin_a_headers, tenant_a):
        response = client.get("/api/admin/settings", headers=admin_a_headers)

        assert response.status_code == 200
        assert response.json()["id"] == tenant_a.id
        assert response.json()["subdomain"] == "elysium"

    def test_update_settings(self, client, admin_a_headers):
        response = client.patch(
            "/api/admin/settings",
            json={"restaurant_name": "Elysium Coffee", "primary_color": "#112233"},
            headers=admin_a_headers,
        )

        assert response.status_code == 200
        assert response.json()["restaurant_name"] == "Elysium Coffee"
        assert response.json()["primary_color"] == "#112233"

    def test_bad_color_rejected(self, client, admin_a_headers):
        response = client.patch(
            "/api/admin/settings", json={"primary_color": "blue"}, headers=admin_a_headers
        )

        assert response.status_code == 422

    def test_admin_cannot_claim_another_restaurants_host(
        self, client, db_session, admin_a_headers, tenant_a, tenant_b
    ):
        """Custom domains are not part of the admin settings"""
        response = client.patch(
            "/api/admin/settings",
            json={"custom_domain": "bistro.nowaiter.app", "restaurant_name": "Elysium Coffee"},
            headers=admin_a_headers,
        )

        assert response.status_code == 200
        assert response.json()["custom_domain"] is None
        db_session.refresh(tenant_a)
        assert tenant_a.custom_domain is None

        menu = client.get("/api/menu", headers={"host": "bistro.nowaiter.app"})
        assert menu.status_code == 200
        assert menu.json()["restaurant"]["subdomain"] == "bistro"

    def test_malformed_contact_email_rejected(self, client, admin_a_headers):
        response = client.patch(
            "/api/admin/settings", json={"email": "not-an-email"}, headers=admin_a_headers
        )

        assert response.status_code == 422

    def test_menu_qr_download(self, client, admin_a_headers, tenant_a):
        response = client.get("/api/admin/menu-qr", headers=admin_a_headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert 'filename="elysium-menu-qr.png"' in response.headers["content-disposition"]
        assert response.content.startswith(b"\x89PNG\r\n\x1a\n")
        assert response.content == menu_qr_png(menu_url_for("elysium"))

    def test_menu_qr_requires_bound_restaurant(self, client, super_admin_headers):
        response = client.get("/api/admin/menu-qr", headers=super_admin_headers)

        assert response.status_code == 403

    def test_dashboard_counts(self, client, admin_a_headers, coffee_menu):
        response = client.get("/api/admin/dashboard", headers=admin_a_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total_categories"] == 1
        assert data["total_menu_items"] == 2
        assert data["available_menu_items"] == 1
        assert data["total_modifier_groups"] == 2
        assert data["menu_url"].startswith("https://elysium.")
