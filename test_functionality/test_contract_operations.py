"""Tests for the store-backed operations, run through the executor.

Today is 2025-01-01 (see conftest.ctx). Sample contracts:
    cloud        Acme Corp  250000  2024-01-01..2025-01-31  active
    license      Globex      50000  2024-03-01..2025-02-28  active
    consulting   Initech    120000  2024-01-01..2024-12-31  expired
    maintenance  Acme Corp   30000  2024-06-01..2025-05-31  pending
"""

import logging

import pytest

from contract_agent.agent.executor import OperationExecutor
from contract_agent.agent.tools.contracts import contract_tools
from contract_agent.agent.tools.registry import ToolRegistry
from contract_agent.application.services.contract_service import ContractService

from conftest import add_contract, payload

NEW_CONTRACT = {
    "name": "Data Platform",
    "counterpartyName": "Umbrella",
    "amount": 90000,
    "startDate": "2025-01-01",
    "endDate": "2025-12-31",
}


class TestReads:

    async def test_get_contracts_includes_derived_fields(self, executor, ctx, sample_contracts):
        result = await executor.execute("getContracts", payload(), ctx)

        assert result.success is True
        assert result.count == 4
        by_name = {c["name"]: c for c in result.contracts}
        cloud = by_name["Cloud Infrastructure"]
        assert cloud["counterpartyName"] == "Acme Corp"
        assert cloud["duration"] == 396
        assert cloud["daysRemaining"] == 30
        assert cloud["monthlyAmount"] == 18939.39
        assert by_name["Consulting Services"]["daysRemaining"] == -1

    async def test_get_contracts_newest_first(self, executor, ctx, sample_contracts):
        result = await executor.execute("getContracts", None, ctx)

        assert [c["name"] for c in result.contracts] == [
            "Hardware Maintenance", "Consulting Services", "Software License", "Cloud Infrastructure",
        ]

    async def test_get_contracts_without_calculations(self, executor, ctx, sample_contracts):
        result = await executor.execute("getContracts", payload(includeCalculations=False), ctx)

        assert "duration" not in result.contracts[0]
        assert "daysRemaining" not in result.contracts[0]

    async def test_get_by_id(self, executor, ctx, sample_contracts):
        cloud = sample_contracts["cloud"]

        result = await executor.execute("getContractById", payload(id=cloud.id), ctx)

        assert result.success is True
        assert result.contract["id"] == cloud.id
        assert result.contract["daysRemaining"] == 30

    async def test_get_by_missing_id(self, executor, ctx, sample_contracts):
        result = await executor.execute("getContractById", payload(id="nope"), ctx)

        assert result.success is False
        assert result.error == "Contract not found: nope"


class TestAddAndUpdate:

    async def test_add_contract_defaults_to_pending(self, executor, ctx, repo):
        result = await executor.execute("addContract", payload(**NEW_CONTRACT), ctx)

        assert result.success is True
        assert result.contract["status"] == "pending"
        assert result.contract["duration"] == 364
        assert result.contract["id"]

        stored = await repo.get_by_id(result.contract["id"])
        assert stored.counterparty_name == "Umbrella"
        assert stored.created_at

    async def test_add_contract_rejects_bad_date(self, executor, ctx, repo):
        result = await executor.execute(
            "addContract", payload(**{**NEW_CONTRACT, "endDate": "31/12/2025"}), ctx,
        )

        assert result.error == "invalid arguments"
        assert "endDate" in result.details
        assert await repo.get_all() == []

    async def test_add_contract_rejects_derived_fields(self, executor, ctx, repo):
        result = await executor.execute(
            "addContract", payload(**NEW_CONTRACT, monthlyAmount=7500), ctx,
        )

        assert result.error == "invalid arguments"
        assert await repo.get_all() == []

    async def test_add_contract_rejects_unknown_status(self, executor, ctx):
        result = await executor.execute(
            "addContract", payload(**NEW_CONTRACT, status="archived"), ctx,
        )

        assert result.error == "invalid arguments"

    async def test_update_by_id(self, executor, ctx, repo, sample_contracts):
        license_ = sample_contracts["license"]

        result = await executor.execute(
            "updateContract", payload(id=license_.id, updates={"amount": 65000, "status": "expired"}), ctx,
        )

        assert result.success is True
        assert result.contract["amount"] == 65000
        stored = await repo.get_by_id(license_.id)
        assert stored.amount == 65000
        assert stored.status == "expired"
        assert stored.name == "Software License"

    async def test_update_missing_id_changes_nothing(self, executor, ctx, repo, sample_contracts):
        before = await repo.get_all()

        result = await executor.execute(
            "updateContract", payload(id="nope", updates={"amount": 1}), ctx,
        )

        assert result.success is False
        assert result.error == "Contract not found: nope"
        assert await repo.get_all() == before

    async def test_update_with_no_fields(self, executor, ctx, sample_contracts):
        result = await executor.execute(
            "updateContract", payload(id=sample_contracts["cloud"].id, updates={}), ctx,
        )

        assert result.success is False
        assert result.error == "invalid arguments"
        assert "No updates provided" in result.details

    async def test_update_rejects_derived_fields(self, executor, ctx, sample_contracts):
        result = await executor.execute(
            "updateContract",
            payload(id=sample_contracts["cloud"].id, updates={"daysRemaining": 10}),
            ctx,
        )

        assert result.error == "invalid arguments"

    async def test_update_by_name_is_case_insensitive(self, executor, ctx, repo, sample_contracts):
        result = await executor.execute(
            "updateContractByName", payload(name="software LICENSE", updates={"status": "cancelled"}), ctx,
        )

        assert result.success is True
        assert result.contract["id"] == sample_contracts["license"].id
        assert (await repo.get_by_id(sample_contracts["license"].id)).status == "cancelled"

    async def test_update_by_name_without_match_changes_nothing(self, executor, ctx, repo, sample_contracts):
        before = await repo.get_all()

        result = await executor.execute(
            "updateContractByName", payload(name="Wayne Enterprises", updates={"amount": 1}), ctx,
        )

        assert result.success is False
        assert result.error == 'No contract found matching "Wayne Enterprises"'
        assert await repo.get_all() == before

    async def test_ambiguous_name_updates_newest_match(self, executor, ctx, repo, caplog):
        older = await add_contract(repo, "Acme Cloud Hosting")
        newer = await add_contract(repo, "Acme Cloud Backup")

        with caplog.at_level(logging.WARNING):
            result = await executor.execute(
                "updateContractByName", payload(name="acme cloud", updates={"amount": 1}), ctx,
            )

        assert result.contract["id"] == newer.id
        assert (await repo.get_by_id(older.id)).amount == 100000
        assert "matched 2 contracts" in caplog.text


class TestDeletes:

    async def test_delete_by_id_returns_remaining(self, executor, ctx, repo, sample_contracts):
        cloud = sample_contracts["cloud"]

        result = await executor.execute("deleteContract", payload(id=cloud.id), ctx)

        assert result.success is True
        assert result.id == cloud.id
        assert len(result.contracts) == 3
        assert cloud.id not in [c["id"] for c in result.contracts]
        assert await repo.get_by_id(cloud.id) is None

    async def test_delete_missing_id(self, executor, ctx, repo, sample_contracts):
        result = await executor.execute("deleteContract", payload(id="nope"), ctx)

        assert result.success is False
        assert len(await repo.get_all()) == 4

    async def test_delete_many_counts_only_existing(self, executor, ctx, repo, sample_contracts):
        ids = [sample_contracts["cloud"].id, sample_contracts["license"].id, "nope"]

        result = await executor.execute("deleteContracts", payload(ids=ids), ctx)

        assert result.success is True
        assert result.deleted_count == 2
        assert result.to_dict()["deletedCount"] == 2
        assert len(await repo.get_all()) == 2

    async def test_delete_many_needs_ids(self, executor, ctx):
        result = await executor.execute("deleteContracts", payload(ids=[]), ctx)

        assert result.error == "invalid arguments"

    async def test_delete_by_name(self, executor, ctx, repo, sample_contracts):
        result = await executor.execute("deleteContractByName", payload(name="consulting"), ctx)

        assert result.success is True
        assert result.deleted_contract["name"] == "Consulting Services"
        assert "Consulting Services" not in [c["name"] for c in result.contracts]
        assert len(await repo.get_all()) == 3

    async def test_delete_by_name_without_match_changes_nothing(self, executor, ctx, repo, sample_contracts):
        result = await executor.execute("deleteContractByName", payload(name="Wayne"), ctx)

        assert result.success is False
        assert len(await repo.get_all()) == 4


class TestAnalytics:

    async def test_total_value(self, executor, ctx, sample_contracts):
        result = await executor.execute("calculateTotalValue", payload(), ctx)

        assert result.total_value == 450000
        assert result.contract_count == 4
        assert result.message == "Total value: $450,000.00"

    async def test_total_value_with_filters(self, executor, ctx, sample_contracts):
        result = await executor.execute("calculateTotalValue", payload(filters=[
            {"column": "status", "operator": "equals", "value": "active"},
        ]), ctx)

        assert result.total_value == 300000
        assert result.contract_count == 2

    async def test_total_value_with_between_filter(self, executor, ctx, sample_contracts):
        result = await executor.execute("calculateTotalValue", payload(filters=[
            {"column": "amount", "operator": "between", "value": 50000, "value2": 120000},
        ]), ctx)

        assert result.total_value == 170000

    async def test_average_value(self, executor, ctx, sample_contracts):
        result = await executor.execute("calculateAverageValue", payload(), ctx)

        assert result.average_value == 112500
        assert result.contract_count == 4

    async def test_average_of_nothing_is_zero(self, executor, ctx, repo):
        result = await executor.execute("calculateAverageValue", payload(), ctx)

        assert result.success is True
        assert result.average_value == 0
        assert result.contract_count == 0

    async def test_duration_for_one_contract(self, executor, ctx, sample_contracts):
        result = await executor.execute(
            "calculateContractDuration", payload(contractId=sample_contracts["license"].id), ctx,
        )

        assert result.duration == 364
        assert result.contract_id == sample_contracts["license"].id

    async def test_durations_for_all_contracts(self, executor, ctx, sample_contracts):
        result = await executor.execute("calculateContractDuration", payload(), ctx)

        assert len(result.durations) == 4
        assert {"id", "name", "duration"} == set(result.durations[0])

    async def test_monthly_value(self, executor, ctx, sample_contracts):
        result = await executor.execute(
            "calculateMonthlyValue", payload(contractId=sample_contracts["cloud"].id), ctx,
        )

        assert result.monthly_value == 18939.39

    async def test_monthly_value_for_missing_contract(self, executor, ctx, sample_contracts):
        result = await executor.execute("calculateMonthlyValue", payload(contractId="nope"), ctx)

        assert result.success is False
        assert result.error == "Contract not found: nope"

    async def test_expiring_excludes_ended_contracts(self, executor, ctx, sample_contracts):
        result = await executor.execute("getExpiringContracts", payload(daysAhead=30), ctx)

        assert [c["name"] for c in result.contracts] == ["Cloud Infrastructure"]
        assert result.count == 1

    async def test_expiring_window(self, executor, ctx, sample_contracts):
        result = await executor.execute("getExpiringContracts", payload(daysAhead=60), ctx)

        assert {c["name"] for c in result.contracts} == {"Cloud Infrastructure", "Software License"}

    async def test_expiring_defaults_to_thirty_days(self, executor, ctx, sample_contracts):
        result = await executor.execute("getExpiringContracts", None, ctx)

        assert result.count == 1

    async def test_group_by_client(self, executor, ctx, sample_contracts):
        result = await executor.execute("groupByClient", payload(), ctx)

        assert result.client_count == 3
        assert [g["clientName"] for g in result.groups] == ["Acme Corp", "Initech", "Globex"]
        acme = result.groups[0]
        assert acme["contractCount"] == 2
        assert acme["totalValue"] == 280000
        assert acme["averageValue"] == 140000

    async def test_group_by_client_sorted_by_name(self, executor, ctx, sample_contracts):
        result = await executor.execute(
            "groupByClient", payload(sortBy="clientName", sortDirection="asc"), ctx,
        )

        assert [g["clientName"] for g in result.groups] == ["Acme Corp", "Globex", "Initech"]

    async def test_group_by_status(self, executor, ctx, sample_contracts):
        result = await executor.execute("groupByStatus", payload(), ctx)

        groups = {g["status"]: g for g in result.groups}
        assert set(groups) == {"active", "expired", "pending"}
        assert groups["active"]["contractCount"] == 2
        assert groups["active"]["totalValue"] == 300000

    async def test_group_by_status_without_values(self, executor, ctx, sample_contracts):
        result = await executor.execute("groupByStatus", payload(includeValue=False), ctx)

        assert all("totalValue" not in g for g in result.groups)

    @pytest.mark.parametrize("operation", ["groupByClient", "groupByStatus"])
    async def test_grouped_contracts_carry_derived_fields(self, executor, ctx, sample_contracts, operation):
        result = await executor.execute(operation, payload(), ctx)

        nested = [c for g in result.groups for c in g["contracts"]]
        assert len(nested) == 4
        for contract in nested:
            assert {"duration", "daysRemaining", "monthlyAmount"} <= set(contract)
        cloud = next(c for c in nested if c["name"] == "Cloud Infrastructure")
        assert cloud["daysRemaining"] == 30
        assert cloud["monthlyAmount"] == 18939.39


class BrokenRepository:
    """Repository whose every call fails."""

    def __getattr__(self, name):
        async def fail(*args, **kwargs):
            raise RuntimeError("database is locked")
        return fail


class TestStoreFailures:

    async def test_store_exception_becomes_operation_failure(self, ctx):
        registry = ToolRegistry()
        for tool in contract_tools(ContractService(BrokenRepository())):
            registry.register(tool)
        executor = OperationExecutor(registry)

        result = await executor.execute("getContracts", payload(), ctx)

        assert result.success is False
        assert result.error == "Failed to fetch contracts"
        assert result.details == "database is locked"

    async def test_each_operation_names_its_failure(self, ctx):
        registry = ToolRegistry()
        for tool in contract_tools(ContractService(BrokenRepository())):
            registry.register(tool)
        executor = OperationExecutor(registry)

        result = await executor.execute("deleteContracts", payload(ids=["a"]), ctx)

        assert result.error == "Failed to delete contracts"
