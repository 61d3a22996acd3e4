import pandas as pd
import pytest

from field_area.config import SurveyConfig
from field_area.errors import FixFileFormatError
from field_area.main import main
from field_area.models import AggregateResult
from field_area.replay import WalkReplayer, load_fix_walks

from conftest import make_fix, square_latlon


def _walk_rows(walk, latlons, start_ts=0.0, step_s=1.0, accuracy=3.0):
    return [
        {
            "walk": walk,
            "latitude": lat,
            "longitude": lon,
            "accuracy": accuracy,
            "timestamp": start_ts + i * step_s,
        }
        for i, (lat, lon) in enumerate(latlons)
    ]


@pytest.fixture
def walks_csv(tmp_path):
    rows = _walk_rows("A", square_latlon()) + _walk_rows(
        "B", square_latlon(), start_ts=100.0
    )
    path = tmp_path / "walks.csv"
    pd.DataFrame(rows).to_csv(path, index=False)
    return path


def test_load_fix_walks_groups_and_orders(tmp_path) -> None:
    rows = _walk_rows("A", square_latlon())
    rows.reverse()
    path = tmp_path / "fixes.csv"
    pd.DataFrame(rows).to_csv(path, index=False)
    walks = load_fix_walks(path)
    assert list(walks) == ["A"]
    assert [f.timestamp for f in walks["A"]] == [0.0, 1.0, 2.0, 3.0]
    assert walks["A"][0].accuracy_m == 3.0


def test_load_without_walk_column_and_iso_timestamps(tmp_path) -> None:
    path = tmp_path / "fixes.csv"
    pd.DataFrame(
        {
            "Latitude": [0.0, 0.0, "bad"],
            "Longitude": [0.0, 0.001, 0.001],
            "Accuracy": [4.0, 4.0, 4.0],
            "Timestamp": ["2025-03-01T08:00:00Z", "2025-03-01T08:00:05Z", "2025-03-01T08:00:10Z"],
        }
    ).to_csv(path, index=False)
    walks = load_fix_walks(path)
    fixes = walks["1"]
    assert len(fixes) == 2
    assert fixes[1].timestamp - fixes[0].timestamp == pytest.approx(5.0)


def test_non_finite_rows_are_dropped_and_walk_replays(tmp_path) -> None:
    rows = _walk_rows("A", square_latlon())
    rows.append(
        {"walk": "A", "latitude": "inf", "longitude": 0.0, "accuracy": 3.0, "timestamp": 4.0}
    )
    rows.append(
        {"walk": "A", "latitude": 0.0, "longitude": 0.0005, "accuracy": 3.0, "timestamp": "inf"}
    )
    rows.append(
        {"walk": "A", "latitude": 0.0, "longitude": 0.0005, "accuracy": "-inf", "timestamp": 5.0}
    )
    path = tmp_path / "fixes.csv"
    pd.DataFrame(rows).to_csv(path, index=False)
    walks = load_fix_walks(path)
    assert len(walks["A"]) == 4

    replayer = WalkReplayer(SurveyConfig(tick_interval_s=1.0))
    result = replayer.replay(walks["A"])
    assert result.points_recorded == 4
    assert result.area_m2 == pytest.approx(10_000.0, rel=0.02)
    # The replayer is ready for the next walk.
    assert replayer.replay(walks["A"]).measurement_index == 2


def test_missing_column_raises(tmp_path) -> None:
    path = tmp_path / "fixes.csv"
    pd.DataFrame({"latitude": [0.0], "longitude": [0.0]}).to_csv(path, index=False)
    with pytest.raises(FixFileFormatError):
        load_fix_walks(path)


def test_replay_without_stale_ticks() -> None:
    fixes = [make_fix(lat, lon, ts=float(i)) for i, (lat, lon) in enumerate(square_latlon())]
    result = WalkReplayer(SurveyConfig(tick_interval_s=1.0)).replay(fixes)
    assert result.points_recorded == 4
    assert result.skipped_point_count == 0
    assert result.area_m2 == pytest.approx(10_000.0, rel=0.02)


def test_replay_reuses_stale_fix_between_sparse_fixes() -> None:
    fixes = [make_fix(lat, lon, ts=5.0 * i) for i, (lat, lon) in enumerate(square_latlon())]
    result = WalkReplayer(SurveyConfig(tick_interval_s=1.0)).replay(fixes)
    assert result.points_recorded == 4
    # Ticks at 1-4, 6-9 and 11-14 resample an already accepted fix.
    assert result.skipped_point_count == 12
    assert result.data_quality_percent == pytest.approx(25.0)


def test_replay_walks_reports_failures(walks_csv) -> None:
    walks = load_fix_walks(walks_csv)
    walks["C"] = walks["A"][:2]
    replayer = WalkReplayer()
    outcomes = replayer.replay_walks(walks)
    assert [o.walk for o in outcomes] == ["A", "B", "C"]
    assert outcomes[0].result is not None and outcomes[1].result is not None
    assert outcomes[2].result is None
    assert "at least 3" in outcomes[2].error
    average = replayer.aggregator.compute_average()
    assert isinstance(average, AggregateResult)
    assert average.count == 2


def test_cli_replay_writes_workbook(walks_csv, tmp_path) -> None:
    out_path = tmp_path / "results.xlsx"
    code = main(["replay", "--csv", str(walks_csv), "--out", str(out_path)])
    assert code == 0
    with pd.ExcelFile(out_path) as xf:
        assert "Average" in xf.sheet_names


def test_cli_missing_file(tmp_path) -> None:
    assert main(["replay", "--csv", str(tmp_path / "missing.csv")]) == 1
