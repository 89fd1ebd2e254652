from datetime import datetime, timezone

import pytest

from metrics import build_cluster_usage, round_fraction, usage_fraction
from models import (
    CaptureInterval,
    InfraManager,
    MetricSample,
    ProviderFamily,
    ResourceRef,
    ResourceType,
)


def _cluster_rollup(
    sample_id: int, cluster: ResourceRef | None, **values: float | None
) -> MetricSample:
    return MetricSample(
        id=sample_id,
        resource_type=ResourceType.CLUSTER,
        resource_id=cluster.id if cluster is not None else 999,
        resource=cluster,
        capture_interval_name=CaptureInterval.HOURLY,
        timestamp=datetime(2026, 10, 18, 10, 0, tzinfo=timezone.utc),
        **values,
    )


def test_usage_fraction_rescales_and_rounds_half_up() -> None:
    assert usage_fraction(87.5, resource_id=1, field="cpu") == 0.88
    assert usage_fraction(12.5, resource_id=1, field="cpu") == 0.13
    assert usage_fraction(0.0, resource_id=1, field="cpu") == 0.0
    assert usage_fraction(100.0, resource_id=1, field="cpu") == 1.0
    assert usage_fraction(None, resource_id=1, field="cpu") is None


@pytest.mark.parametrize(("rate", "expected"), [(150.0, 1.0), (-5.0, 0.0)])
def test_usage_fraction_clamps_out_of_range(rate: float, expected: float) -> None:
    assert usage_fraction(rate, resource_id=1, field="mem") == expected


def test_round_fraction_half_up() -> None:
    assert round_fraction(0.125) == 0.13
    assert round_fraction(0.875) == 0.88
    assert round_fraction(0.3333) == 0.33


def test_cluster_usage_entries_for_cpu_and_memory() -> None:
    cluster = ResourceRef(id=7, name="prod", ems_id=1, ems_name="vcenter-1")
    samples = [
        _cluster_rollup(
            1,
            cluster,
            derived_vm_numvcpus=15.5,
            cpu_usage_rate_average=87.5,
            derived_memory_available=1536.0,
            mem_usage_absolute_average=40.0,
        )
    ]

    cpu, memory = build_cluster_usage(samples, scope=None)

    assert len(cpu) == 1
    assert cpu[0].cluster_id == 7
    assert cpu[0].cluster_name == "prod"
    assert cpu[0].provider_name == "vcenter-1"
    assert cpu[0].unit == "Cores"
    assert cpu[0].total == 16
    assert cpu[0].percent == 0.88

    assert memory[0].unit == "GB"
    assert memory[0].total == 2
    assert memory[0].percent == 0.4


def test_missing_measurements_stay_null() -> None:
    cluster = ResourceRef(id=7, name="prod", ems_id=1, ems_name="vcenter-1")

    cpu, memory = build_cluster_usage([_cluster_rollup(1, cluster)], scope=None)

    assert cpu[0].total is None
    assert cpu[0].percent is None
    assert memory[0].total is None
    assert memory[0].percent is None


def test_rollup_for_purged_cluster_is_skipped() -> None:
    live = ResourceRef(id=7, name="prod", ems_id=1, ems_name="vcenter-1")
    samples = [
        _cluster_rollup(1, None, cpu_usage_rate_average=50.0),
        _cluster_rollup(2, live, cpu_usage_rate_average=20.0),
    ]

    cpu, memory = build_cluster_usage(samples, scope=None)

    assert [entry.cluster_id for entry in cpu] == [7]
    assert [entry.cluster_id for entry in memory] == [7]


def test_scoped_heatmap_uses_scope_manager_name() -> None:
    scope = InfraManager(id=1, name="Scoped", provider_family=ProviderFamily.VMWARE)
    cluster = ResourceRef(id=7, name="prod", ems_id=1, ems_name="vcenter-1")

    cpu, memory = build_cluster_usage([_cluster_rollup(1, cluster)], scope=scope)

    assert cpu[0].provider_name == "Scoped"
    assert memory[0].provider_name == "Scoped"


def test_nan_totals_and_rates_stay_null() -> None:
    cluster = ResourceRef(id=7, name="prod", ems_id=1, ems_name="vcenter-1")
    sample = _cluster_rollup(
        1,
        cluster,
        derived_vm_numvcpus=float("nan"),
        cpu_usage_rate_average=float("nan"),
        derived_memory_available=float("nan"),
        mem_usage_absolute_average=30.0,
    )

    cpu, memory = build_cluster_usage([sample], scope=None)

    assert cpu[0].total is None
    assert cpu[0].percent is None
    assert memory[0].total is None
    assert memory[0].percent == 0.3
