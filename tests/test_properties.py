"""Properties and their units (locals)."""
import pytest

import rentmaster.routers.properties as property_routes
from rentmaster.models import AuditLog, Property, Unit
from rentmaster.models.enums import AuditAction, LeaseStatus, UnitStatus

PROPERTIES = "/api/properties"
LOCALS = "/api/properties/locals"


class TestProperties:
    async def test_create_and_get(self, client, seed):
        resp = await client.post(
            PROPERTIES,
            json={"name": "Riverside Mall", "location": "Gombe", "description": "Shops on two floors"},
        )
        assert resp.status_code == 201
        created = resp.json()
        assert created["name"] == "Riverside Mall"
        assert created["units"] == []

        resp = await client.get(f"{PROPERTIES}/{created['id']}")
        assert resp.status_code == 200
        assert resp.json()["location"] == "Gombe"

        entries = await seed.all(AuditLog, AuditLog.entity_table == "properties")
        assert [e.action for e in entries] == [AuditAction.CREATE]

    async def test_name_too_short(self, client, users):
        resp = await client.post(PROPERTIES, json={"name": "R", "location": "Gombe"})
        assert resp.status_code == 422

    async def test_unknown_property(self, client, users):
        resp = await client.get(f"{PROPERTIES}/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Property not found"

    async def test_update(self, client, seed):
        prop = await seed.property()
        resp = await client.put(f"{PROPERTIES}/{prop.id}", json={"location": "Limete"})
        assert resp.status_code == 200
        assert resp.json()["location"] == "Limete"
        assert resp.json()["name"] == "Downtown Plaza"

        entries = await seed.all(AuditLog, AuditLog.entity_id == prop.id)
        assert entries[0].old_data["location"] == "Central Business District"
        assert entries[0].new_data["location"] == "Limete"

    async def test_list_shows_only_active_leases(self, client, seed, leased):
        other = await seed.unit(leased["property"], reference_code="LOC-102")
        await seed.lease(leased["tenant"], other, reference="LEASE-OLD", status=LeaseStatus.TERMINATED)

        resp = await client.get(PROPERTIES)
        assert resp.status_code == 200
        units = {u["reference_code"]: u for u in resp.json()[0]["units"]}
        assert [lease["lease_reference"] for lease in units["LOC-101"]["leases"]] == ["LEASE-001"]
        assert units["LOC-102"]["leases"] == []

        resp = await client.get(f"{PROPERTIES}/{leased['property'].id}")
        units = {u["reference_code"]: u for u in resp.json()["units"]}
        assert [lease["lease_reference"] for lease in units["LOC-102"]["leases"]] == ["LEASE-OLD"]
        assert units["LOC-101"]["leases"][0]["tenant"]["name"] == "Acme Trading"

    async def test_delete_with_units_rejected(self, client, seed):
        prop = await seed.property()
        await seed.unit(prop)

        resp = await client.delete(f"{PROPERTIES}/{prop.id}")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Cannot delete property with existing locals"

    async def test_delete_empty(self, client, seed):
        prop = await seed.property()

        resp = await client.delete(f"{PROPERTIES}/{prop.id}")
        assert resp.status_code == 204
        assert await seed.get(Property, prop.id) is None

        entries = await seed.all(AuditLog, AuditLog.entity_id == prop.id)
        assert entries[0].action == AuditAction.DELETE
        assert entries[0].old_data["name"] == "Downtown Plaza"

    async def test_manager_cannot_delete(self, manager_client, seed):
        prop = await seed.property()

        resp = await manager_client.delete(f"{PROPERTIES}/{prop.id}")
        assert resp.status_code == 403
        assert await seed.get(Property, prop.id) is not None


class TestLocals:
    async def test_create(self, client, seed):
        prop = await seed.property()
        resp = await client.post(
            f"{PROPERTIES}/{prop.id}/locals",
            json={"reference_code": "LOC-201", "floor": "1", "unit_type": "shop", "size_m2": 40},
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["status"] == "AVAILABLE"
        assert data["property_id"] == str(prop.id)

    async def test_duplicate_reference(self, client, seed):
        prop = await seed.property()
        await seed.unit(prop, reference_code="LOC-201")

        resp = await client.post(f"{PROPERTIES}/{prop.id}/locals", json={"reference_code": "LOC-201"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Local reference code already exists"

    async def test_unknown_property(self, client, users):
        resp = await client.post(
            f"{PROPERTIES}/00000000-0000-0000-0000-000000000000/locals", json={"reference_code": "LOC-201"}
        )
        assert resp.status_code == 404

    @pytest.mark.parametrize("method", ["post", "put"])
    async def test_occupied_cannot_be_set_by_hand(self, client, seed, method):
        prop = await seed.property()
        unit = await seed.unit(prop)

        if method == "post":
            resp = await client.post(
                f"{PROPERTIES}/{prop.id}/locals", json={"reference_code": "LOC-202", "status": "OCCUPIED"}
            )
        else:
            resp = await client.put(f"{LOCALS}/{unit.id}", json={"status": "OCCUPIED"})
        assert resp.status_code == 422

    async def test_maintenance_toggle(self, client, seed):
        prop = await seed.property()
        unit = await seed.unit(prop)

        resp = await client.put(f"{LOCALS}/{unit.id}", json={"status": "MAINTENANCE"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "MAINTENANCE"

        resp = await client.put(f"{LOCALS}/{unit.id}", json={"status": "AVAILABLE"})
        assert resp.json()["status"] == "AVAILABLE"

    async def test_leased_status_is_locked(self, client, seed, leased):
        resp = await client.put(f"{LOCALS}/{leased['unit'].id}", json={"status": "MAINTENANCE"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Cannot change status of a leased local"

        unit = await seed.get(Unit, leased["unit"].id)
        assert unit.status == UnitStatus.OCCUPIED

    async def test_lease_committed_after_status_check(self, client, seed, monkeypatch):
        prop = await seed.property()
        unit = await seed.unit(prop)
        tenant = await seed.tenant()

        async def lease_lands_meanwhile(db, unit_id):
            await seed.lease(tenant, unit)
            return False

        monkeypatch.setattr(property_routes, "_has_active_lease", lease_lands_meanwhile)
        resp = await client.put(f"{LOCALS}/{unit.id}", json={"status": "MAINTENANCE", "floor": "3"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Cannot change status of a leased local"

        stored = await seed.get(Unit, unit.id)
        assert stored.status == UnitStatus.OCCUPIED
        assert stored.floor is None
        assert await seed.all(AuditLog, AuditLog.entity_table == "units") == []

    async def test_leased_details_still_editable(self, client, leased):
        resp = await client.put(f"{LOCALS}/{leased['unit'].id}", json={"floor": "2"})
        assert resp.status_code == 200
        assert resp.json()["floor"] == "2"
        assert resp.json()["status"] == "OCCUPIED"

    async def test_delete_with_lease_history_rejected(self, client, seed, leased):
        resp = await client.delete(f"{LOCALS}/{leased['unit'].id}")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Cannot delete local with existing leases"

    async def test_delete(self, client, seed):
        prop = await seed.property()
        unit = await seed.unit(prop)

        resp = await client.delete(f"{LOCALS}/{unit.id}")
        assert resp.status_code == 204
        assert await seed.get(Unit, unit.id) is None
