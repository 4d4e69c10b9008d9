"""Lease lifecycle: creation, termination, updates and the unit status they drive."""
from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from rentmaster.models import AuditLog, Lease, Unit
from rentmaster.models.enums import AuditAction, LeaseStatus, UnitStatus
from rentmaster.services.leasing import LeaseService

LEASES = "/api/leases"


def lease_payload(tenant, unit, reference="LEASE-2024-001", **overrides):
    payload = {
        "tenant_id": str(tenant.id),
        "local_id": str(unit.id),
        "lease_reference": reference,
        "start_date": "2024-01-01T00:00:00",
        "end_date": "2024-12-31T00:00:00",
        "rent_amount": "1500.00",
        "billing_cycle": "MONTHLY",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
async def vacant(seed):
    prop = await seed.property()
    unit = await seed.unit(prop)
    tenant = await seed.tenant()
    return {"property": prop, "unit": unit, "tenant": tenant}


# ── Create ───────────────────────────────────────────────────────────────────

class TestCreateLease:
    async def test_create_occupies_unit(self, client, seed, vacant):
        resp = await client.post(LEASES, json=lease_payload(vacant["tenant"], vacant["unit"]))
        assert resp.status_code == 201
        data = resp.json()

        assert data["status"] == "ACTIVE"
        assert data["rent_amount"] == 1500.0
        assert data["local_id"] == str(vacant["unit"].id)
        assert data["local"]["status"] == "OCCUPIED"
        assert data["local"]["property"]["name"] == "Downtown Plaza"
        assert data["tenant"]["name"] == "Acme Trading"

        unit = await seed.get(Unit, vacant["unit"].id)
        assert unit.status == UnitStatus.OCCUPIED

    async def test_create_writes_audit_entry(self, client, seed, users, vacant):
        resp = await client.post(LEASES, json=lease_payload(vacant["tenant"], vacant["unit"]))
        assert resp.status_code == 201

        entries = await seed.all(AuditLog, AuditLog.entity_table == "leases")
        assert len(entries) == 1
        assert entries[0].action == AuditAction.CREATE
        assert entries[0].user_id == users["admin"].id
        assert entries[0].new_data["lease_reference"] == "LEASE-2024-001"
        assert entries[0].old_data is None

    async def test_manager_can_create(self, manager_client, vacant):
        resp = await manager_client.post(LEASES, json=lease_payload(vacant["tenant"], vacant["unit"]))
        assert resp.status_code == 201

    async def test_second_lease_on_same_unit_rejected(self, client, seed, vacant):
        first = await client.post(LEASES, json=lease_payload(vacant["tenant"], vacant["unit"]))
        assert first.status_code == 201

        other_tenant = await seed.tenant(name="Jane Doe", email="jane@doe.test")
        resp = await client.post(LEASES, json=lease_payload(other_tenant, vacant["unit"], reference="LEASE-2024-002"))
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Local is not available"

        leases = await seed.all(Lease, Lease.unit_id == vacant["unit"].id)
        assert len(leases) == 1

    async def test_unit_in_maintenance_rejected(self, client, seed, vacant):
        unit = await seed.unit(vacant["property"], reference_code="LOC-102", status=UnitStatus.MAINTENANCE)
        resp = await client.post(LEASES, json=lease_payload(vacant["tenant"], unit))
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Local is not available"

    async def test_available_unit_with_stray_active_lease_rejected(self, client, seed, vacant):
        """A unit marked AVAILABLE that still carries an ACTIVE lease is not leasable."""
        await seed.lease(vacant["tenant"], vacant["unit"], reference="LEASE-OLD")
        unit = await seed.get(Unit, vacant["unit"].id)
        unit.status = UnitStatus.AVAILABLE
        await seed.add(unit)

        resp = await client.post(LEASES, json=lease_payload(vacant["tenant"], vacant["unit"]))
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Local is already leased"

    async def test_missing_tenant(self, client, seed, vacant):
        payload = lease_payload(vacant["tenant"], vacant["unit"])
        payload["tenant_id"] = "00000000-0000-0000-0000-000000000000"
        resp = await client.post(LEASES, json=payload)
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Tenant not found"

        unit = await seed.get(Unit, vacant["unit"].id)
        assert unit.status == UnitStatus.AVAILABLE

    async def test_missing_unit(self, client, vacant):
        payload = lease_payload(vacant["tenant"], vacant["unit"])
        payload["local_id"] = "00000000-0000-0000-0000-000000000000"
        resp = await client.post(LEASES, json=payload)
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Local not found"

    async def test_duplicate_reference_leaves_unit_available(self, client, seed, vacant):
        second = await seed.unit(vacant["property"], reference_code="LOC-102")
        first = await client.post(LEASES, json=lease_payload(vacant["tenant"], vacant["unit"]))
        assert first.status_code == 201

        resp = await client.post(LEASES, json=lease_payload(vacant["tenant"], second))
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Lease reference already exists"

        unit = await seed.get(Unit, second.id)
        assert unit.status == UnitStatus.AVAILABLE

    async def test_end_before_start_is_invalid(self, client, vacant):
        payload = lease_payload(
            vacant["tenant"], vacant["unit"], start_date="2024-06-01T00:00:00", end_date="2024-05-01T00:00:00"
        )
        resp = await client.post(LEASES, json=payload)
        assert resp.status_code == 422

    async def test_open_ended_lease(self, client, vacant):
        payload = lease_payload(vacant["tenant"], vacant["unit"], end_date=None)
        resp = await client.post(LEASES, json=payload)
        assert resp.status_code == 201
        assert resp.json()["end_date"] is None

    async def test_rent_must_be_positive(self, client, vacant):
        resp = await client.post(LEASES, json=lease_payload(vacant["tenant"], vacant["unit"], rent_amount="0"))
        assert resp.status_code == 422

    async def test_new_lease_after_termination(self, client, seed, vacant):
        first = await client.post(LEASES, json=lease_payload(vacant["tenant"], vacant["unit"]))
        await client.post(f"{LEASES}/{first.json()['id']}/terminate")

        resp = await client.post(LEASES, json=lease_payload(vacant["tenant"], vacant["unit"], reference="LEASE-2025-001"))
        assert resp.status_code == 201

        leases = await seed.all(Lease, Lease.unit_id == vacant["unit"].id)
        assert sorted(lease.status for lease in leases) == [LeaseStatus.ACTIVE, LeaseStatus.TERMINATED]

    async def test_create_lands_while_another_holds_unit(self, client, seed, vacant, monkeypatch):
        lock_unit = LeaseService._lock_unit
        competing = {}

        async def lock_then_compete(service, unit_id):
            unit = await lock_unit(service, unit_id)
            if "resp" not in competing:
                competing["resp"] = None
                competing["resp"] = await client.post(
                    LEASES, json=lease_payload(vacant["tenant"], vacant["unit"], reference="LEASE-FAST")
                )
            return unit

        monkeypatch.setattr(LeaseService, "_lock_unit", lock_then_compete)
        resp = await client.post(LEASES, json=lease_payload(vacant["tenant"], vacant["unit"], reference="LEASE-SLOW"))

        assert competing["resp"].status_code == 201
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Local is already leased"

        leases = await seed.all(Lease, Lease.unit_id == vacant["unit"].id)
        assert [(lease.lease_reference, lease.status) for lease in leases] == [("LEASE-FAST", LeaseStatus.ACTIVE)]
        unit = await seed.get(Unit, vacant["unit"].id)
        assert unit.status == UnitStatus.OCCUPIED


class TestActiveLeaseIndex:
    async def test_database_rejects_second_active_lease(self, seed, vacant):
        await seed.lease(vacant["tenant"], vacant["unit"], reference="LEASE-A")
        with pytest.raises(IntegrityError):
            await seed.lease(vacant["tenant"], vacant["unit"], reference="LEASE-B")

    async def test_terminated_leases_do_not_count(self, seed, vacant):
        await seed.lease(vacant["tenant"], vacant["unit"], reference="LEASE-A", status=LeaseStatus.TERMINATED)
        await seed.lease(vacant["tenant"], vacant["unit"], reference="LEASE-B", status=LeaseStatus.TERMINATED)
        await seed.lease(vacant["tenant"], vacant["unit"], reference="LEASE-C")

        leases = await seed.all(Lease, Lease.unit_id == vacant["unit"].id)
        assert len(leases) == 3


# ── Terminate ────────────────────────────────────────────────────────────────

class TestTerminateLease:
    async def test_terminate_frees_unit(self, client, seed, leased):
        resp = await client.post(f"{LEASES}/{leased['lease'].id}/terminate")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "TERMINATED"
        assert data["end_date"] is not None
        assert data["local"]["status"] == "AVAILABLE"

        unit = await seed.get(Unit, leased["unit"].id)
        assert unit.status == UnitStatus.AVAILABLE

    async def test_terminate_with_date(self, client, leased):
        resp = await client.post(
            f"{LEASES}/{leased['lease'].id}/terminate",
            json={"termination_date": "2024-09-30T00:00:00"},
        )
        assert resp.status_code == 200
        assert resp.json()["end_date"].startswith("2024-09-30")

    async def test_terminate_twice(self, client, leased):
        first = await client.post(f"{LEASES}/{leased['lease'].id}/terminate")
        assert first.status_code == 200

        resp = await client.post(f"{LEASES}/{leased['lease'].id}/terminate")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Lease is already terminated"

    async def test_terminate_audited(self, client, seed, leased):
        await client.post(f"{LEASES}/{leased['lease'].id}/terminate")

        entries = await seed.all(AuditLog, AuditLog.entity_id == leased["lease"].id)
        assert [e.action for e in entries] == [AuditAction.TERMINATE]
        assert entries[0].old_data["status"] == "ACTIVE"
        assert entries[0].new_data["status"] == "TERMINATED"

    async def test_terminate_unknown(self, client, users):
        resp = await client.post(f"{LEASES}/00000000-0000-0000-0000-000000000000/terminate")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Lease not found"


# ── Update ───────────────────────────────────────────────────────────────────

class TestUpdateLease:
    async def test_update_terms(self, client, leased):
        resp = await client.put(
            f"{LEASES}/{leased['lease'].id}",
            json={"rent_amount": "1750.50", "billing_cycle": "QUARTERLY"},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["rent_amount"] == 1750.5
        assert data["billing_cycle"] == "QUARTERLY"
        assert data["status"] == "ACTIVE"

    async def test_status_terminated_frees_unit(self, client, seed, leased):
        resp = await client.put(f"{LEASES}/{leased['lease'].id}", json={"status": "TERMINATED"})
        assert resp.status_code == 200
        assert resp.json()["status"] == "TERMINATED"
        assert resp.json()["end_date"] is not None

        unit = await seed.get(Unit, leased["unit"].id)
        assert unit.status == UnitStatus.AVAILABLE

    async def test_cannot_reactivate(self, client, leased):
        await client.post(f"{LEASES}/{leased['lease'].id}/terminate")

        resp = await client.put(f"{LEASES}/{leased['lease'].id}", json={"status": "ACTIVE"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Terminated lease cannot be reactivated"

    async def test_reference_must_stay_unique(self, client, seed, leased):
        other_unit = await seed.unit(leased["property"], reference_code="LOC-102")
        await seed.lease(leased["tenant"], other_unit, reference="LEASE-002")

        resp = await client.put(f"{LEASES}/{leased['lease'].id}", json={"lease_reference": "LEASE-002"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Lease reference already exists"

    async def test_end_date_before_start(self, client, leased):
        resp = await client.put(f"{LEASES}/{leased['lease'].id}", json={"end_date": "2023-06-01T00:00:00"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "end_date must not be before start_date"


# ── Read ─────────────────────────────────────────────────────────────────────

class TestReadLeases:
    async def test_list_filters_by_status(self, client, seed, leased):
        other_unit = await seed.unit(leased["property"], reference_code="LOC-102")
        await seed.lease(leased["tenant"], other_unit, reference="LEASE-OLD", status=LeaseStatus.TERMINATED)

        resp = await client.get(LEASES, params={"status": "ACTIVE"})
        assert resp.status_code == 200
        assert [lease["lease_reference"] for lease in resp.json()] == ["LEASE-001"]

        resp = await client.get(LEASES, params={"local_id": str(other_unit.id)})
        assert [lease["lease_reference"] for lease in resp.json()] == ["LEASE-OLD"]

    async def test_detail_includes_payments_and_documents(self, client, seed, leased, modes):
        await seed.payment(leased["lease"], modes["CASH"], "500.00", datetime(2024, 2, 1))

        resp = await client.get(f"{LEASES}/{leased['lease'].id}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["tenant"]["id"] == str(leased["tenant"].id)
        assert data["local"]["reference_code"] == "LOC-101"
        assert len(data["payments"]) == 1
        assert data["payments"][0]["payment_mode"]["code"] == "CASH"
        assert data["documents"] == []

    async def test_detail_unknown(self, client, users):
        resp = await client.get(f"{LEASES}/00000000-0000-0000-0000-000000000000")
        assert resp.status_code == 404
