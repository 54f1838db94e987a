import pytest

from app.models import AdminUser, MenuCategory, Subscription, Tenant
from app.models.tenant import SubscriptionStatus, SubscriptionTier
from tests.conftest import auth_headers_for


def signup_payload(**overrides):
    payload = {
        "restaurant_name": "Casa Luna",
        "subdomain": "casa-luna",
        "phone": "+52 55 1234 5678",
        "address_line1": "Av. Reforma 100",
        "city": "CDMX",
        "state": "CDMX",
        "postal_code": "06600",
        "plan": "professional",
        "billing_cycle": "annual",
    }
    payload.update(overrides)
    return payload


class TestCheckSubdomain:
    """Tests for POST /api/onboarding/check-subdomain"""

    def test_available(self, client):
        response = client.post("/api/onboarding/check-subdomain", json={"subdomain": "casa-luna"})

        assert response.status_code == 200
        assert response.json()["available"] is True
        assert response.json()["reason"] is None

    def test_case_insensitive(self, client, tenant_a):
        """'Elysium' collides with the existing 'elysium'"""
        response = client.post("/api/onboarding/check-subdomain", json={"subdomain": "Elysium"})

        data = response.json()
        assert data["subdomain"] == "elysium"
        assert data["available"] is False
        assert data["reason"] == "taken"

    def test_reserved(self, client):
        response = client.post("/api/onboarding/check-subdomain", json={"subdomain": "admin"})

        assert response.json()["available"] is False
        assert response.json()["reason"] == "reserved"

    def test_released_subdomain_available_again(self, client, db_session, tenant_a):
        """Soft-deleted restaurants do not hold their subdomain"""
        from datetime import datetime, UTC

        tenant_a.deleted_at = datetime.now(UTC)
        db_session.commit()

        response = client.post("/api/onboarding/check-subdomain", json={"subdomain": "elysium"})

        assert response.json()["available"] is True

    def test_invalid_characters(self, client):
        response = client.post("/api/onboarding/check-subdomain", json={"subdomain": "casa_luna"})

        assert response.status_code == 400
        assert "lowercase letters, numbers, and hyphens" in response.json()["detail"]

    def test_too_short(self, client):
        response = client.post("/api/onboarding/check-subdomain", json={"subdomain": "ab"})

        assert response.status_code == 400

    def test_missing(self, client):
        response = client.post("/api/onboarding/check-subdomain", json={})

        assert response.status_code == 400
        assert response.json()["detail"] == "Subdomain is required"


class TestCheckEmail:
    """Tests for POST /api/onboarding/check-email"""

    def test_new_email(self, client):
        response = client.post("/api/onboarding/check-email", json={"email": "new@example.com"})

        assert response.status_code == 200
        assert response.json() == {"available": True}

    def test_registered_email(self, client, db_session, tenant_a, admin_a):
        tenant_a.billing_email = admin_a.email
        db_session.commit()

        response = client.post("/api/onboarding/check-email", json={"email": admin_a.email.upper()})

        data = response.json()
        assert data["available"] is False
        assert data["reason"] == "registered"
        assert data["subdomain"] == "elysium"

    def test_incomplete_signup(self, client, admin_a):
        response = client.post("/api/onboarding/check-email", json={"email": admin_a.email})

        assert response.json()["available"] is True
        assert response.json()["warning"] == "incomplete"

    @pytest.mark.parametrize("email", ["not-an-email", "owner@casaluna", "owner..x@casaluna.mx", "a b@casaluna.mx"])
    def test_malformed_email(self, client, email):
        response = client.post("/api/onboarding/check-email", json={"email": email})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid email format"

    def test_missing_email(self, client):
        response = client.post("/api/onboarding/check-email", json={})

        assert response.status_code == 400
        assert response.json()["detail"] == "Email is required"


class TestCompleteOnboarding:
    """Tests for POST /api/onboarding/complete"""

    def test_provisions_restaurant(self, client, db_session):
        headers = auth_headers_for("new-owner", email="Owner@CasaLuna.mx")

        response = client.post("/api/onboarding/complete", json=signup_payload(), headers=headers)

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["admin_id"] == "new-owner"
        assert data["subdomain"] == "casa-luna"
        assert data["menu_url"].startswith("https://casa-luna.")

        tenant = db_session.get(Tenant, data["tenant_id"])
        assert tenant.subscription_status == SubscriptionStatus.TRIALING
        assert tenant.subscription_tier == SubscriptionTier.PROFESSIONAL
        assert tenant.billing_email == "owner@casaluna.mx"
        assert tenant.onboarding_completed is True
        assert tenant.total_categories == 4

        admin_user = db_session.get(AdminUser, "new-owner")
        assert admin_user.tenant_id == tenant.id
        assert admin_user.role.value == "admin"

        subscription = db_session.query(Subscription).filter_by(tenant_id=tenant.id).one()
        assert subscription.billing_cycle == "annual"
        assert subscription.trial_ends_at is not None

        names = [
            c.name
            for c in db_session.query(MenuCategory)
            .filter_by(tenant_id=tenant.id)
            .order_by(MenuCategory.position)
        ]
        assert names == ["Beverages", "Food", "Desserts", "Specials"]

    def test_new_admin_can_sign_in(self, client):
        headers = auth_headers_for("new-owner", email="owner@casaluna.mx")
        client.post("/api/onboarding/complete", json=signup_payload(), headers=headers)

        response = client.get("/api/admin/categories/", headers=headers)

        assert response.status_code == 200
        assert response.json()["total"] == 4

    def test_taken_subdomain(self, client, tenant_a):
        headers = auth_headers_for("new-owner", email="owner@casaluna.mx")

        response = client.post(
            "/api/onboarding/complete", json=signup_payload(subdomain="ELYSIUM"), headers=headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "This subdomain is already taken"

    def test_enterprise_requires_contact(self, client):
        headers = auth_headers_for("new-owner", email="owner@casaluna.mx")

        response = client.post(
            "/api/onboarding/complete", json=signup_payload(plan="enterprise"), headers=headers
        )

        assert response.status_code == 400
        assert "contact sales" in response.json()["detail"]

    def test_identity_with_restaurant_rejected(self, client, admin_a):
        headers = auth_headers_for(admin_a.id, email=admin_a.email)

        response = client.post("/api/onboarding/complete", json=signup_payload(), headers=headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "This account already has a restaurant"

    def test_email_owned_by_other_admin(self, client, admin_a):
        headers = auth_headers_for("someone-else", email=admin_a.email)

        response = client.post("/api/onboarding/complete", json=signup_payload(), headers=headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "This email is already registered"

    def test_token_without_email(self, client):
        response = client.post(
            "/api/onboarding/complete", json=signup_payload(), headers=auth_headers_for("new-owner")
        )

        assert response.status_code == 400

    def test_requires_token(self, client):
        response = client.post("/api/onboarding/complete", json=signup_payload())

        assert response.status_code in (401, 403)
