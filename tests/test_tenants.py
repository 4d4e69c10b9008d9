"""Tenant records."""
from datetime import datetime

from rentmaster.models import Tenant
from rentmaster.models.enums import TenantType

TENANTS = "/api/tenants"


class TestTenants:
    async def test_create(self, client, users):
        resp = await client.post(
            TENANTS,
            json={"name": "Jane Doe", "type": "INDIVIDUAL", "email": "jane@doe.test", "phone": "+243990000001"},
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["type"] == "INDIVIDUAL"
        assert data["leases"] == []

    async def test_invalid_email(self, client, users):
        resp = await client.post(TENANTS, json={"name": "Jane Doe", "type": "INDIVIDUAL", "email": "not-an-email"})
        assert resp.status_code == 422

    async def test_search_is_case_insensitive(self, client, seed):
        await seed.tenant()
        await seed.tenant(name="Jane Doe", type=TenantType.INDIVIDUAL, email=None, phone="+243990000001")

        resp = await client.get(TENANTS, params={"search": "ACME"})
        assert [t["name"] for t in resp.json()] == ["Acme Trading"]

        resp = await client.get(TENANTS, params={"search": "99000"})
        assert [t["name"] for t in resp.json()] == ["Jane Doe"]

    async def test_filter_by_type(self, client, seed):
        await seed.tenant()
        await seed.tenant(name="Jane Doe", type=TenantType.INDIVIDUAL, email="jane@doe.test")

        resp = await client.get(TENANTS, params={"type": "COMPANY"})
        assert [t["name"] for t in resp.json()] == ["Acme Trading"]

    async def test_detail_includes_lease_payments(self, client, seed, leased, modes):
        await seed.payment(leased["lease"], modes["MOBILE_MONEY"], "250.00", datetime(2024, 2, 1))

        resp = await client.get(f"{TENANTS}/{leased['tenant'].id}")
        assert resp.status_code == 200
        lease = resp.json()["leases"][0]
        assert lease["local"]["reference_code"] == "LOC-101"
        assert lease["local"]["property"]["name"] == "Downtown Plaza"
        assert lease["payments"][0]["amount"] == 250.0

    async def test_unknown(self, client, users):
        resp = await client.get(f"{TENANTS}/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Tenant not found"

    async def test_update(self, client, seed):
        tenant = await seed.tenant()
        resp = await client.put(f"{TENANTS}/{tenant.id}", json={"phone": "+243970000000"})
        assert resp.status_code == 200
        assert resp.json()["phone"] == "+243970000000"
        assert resp.json()["name"] == "Acme Trading"

    async def test_delete_with_leases_rejected(self, client, leased):
        resp = await client.delete(f"{TENANTS}/{leased['tenant'].id}")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Cannot delete tenant with existing leases"

    async def test_delete(self, client, seed):
        tenant = await seed.tenant()
        resp = await client.delete(f"{TENANTS}/{tenant.id}")
        assert resp.status_code == 204
        assert await seed.get(Tenant, tenant.id) is None

    async def test_manager_cannot_delete(self, manager_client, seed):
        tenant = await seed.tenant()
        resp = await manager_client.delete(f"{TENANTS}/{tenant.id}")
        assert resp.status_code == 403
