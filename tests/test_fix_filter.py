from field_area.config import SurveyConfig
from field_area.filtering import FixFilter
from field_area.models import FilterDecision, RecordedPoint

from conftest import make_fix


def _recorded(lat, lon, accuracy=3.0):
    return RecordedPoint(fix=make_fix(lat, lon, accuracy), sequence=0)


def test_first_fix_accepted_when_accurate(survey_config) -> None:
    fix_filter = FixFilter(survey_config)
    decision = fix_filter.evaluate(make_fix(12.97, 77.59, accuracy=5.0), None)
    assert decision is FilterDecision.ACCEPT
    assert fix_filter.skipped_count == 0


def test_low_accuracy_rejected_regardless_of_distance(survey_config) -> None:
    fix_filter = FixFilter(survey_config)
    previous = _recorded(12.97, 77.59)
    # ~1.1 km away: movement alone would be accepted.
    far_fix = make_fix(12.98, 77.59, accuracy=10.5)
    assert fix_filter.evaluate(far_fix, previous) is FilterDecision.REJECT_LOW_ACCURACY
    # Same rule with no previous point.
    assert fix_filter.evaluate(far_fix, None) is FilterDecision.REJECT_LOW_ACCURACY
    assert fix_filter.skipped_count == 2


def test_accuracy_equal_to_threshold_is_allowed(survey_config) -> None:
    fix_filter = FixFilter(survey_config)
    assert fix_filter.evaluate(make_fix(1.0, 1.0, accuracy=10.0), None).accepted


def test_jitter_rejected_below_min_distance(survey_config) -> None:
    fix_filter = FixFilter(survey_config)
    previous = _recorded(0.0, 0.0)
    # 0.00001 deg of latitude is ~1.1 m
    near = make_fix(0.00001, 0.0)
    assert fix_filter.evaluate(near, previous) is FilterDecision.REJECT_JITTER
    # ~3.3 m is enough movement
    moved = make_fix(0.00003, 0.0)
    assert fix_filter.evaluate(moved, previous) is FilterDecision.ACCEPT


def test_skip_reasons_are_counted_separately() -> None:
    fix_filter = FixFilter(SurveyConfig(accuracy_threshold_m=5.0, min_distance_threshold_m=2.0))
    previous = _recorded(0.0, 0.0)
    fix_filter.evaluate(make_fix(0.0, 0.0, accuracy=20.0), previous)
    fix_filter.evaluate(make_fix(0.0, 0.0, accuracy=1.0), previous)
    fix_filter.evaluate(make_fix(0.0, 0.0, accuracy=1.0), previous)
    assert fix_filter.skip_reasons[FilterDecision.REJECT_LOW_ACCURACY] == 1
    assert fix_filter.skip_reasons[FilterDecision.REJECT_JITTER] == 2
    assert fix_filter.skipped_count == 3


def test_decide_does_not_count(survey_config) -> None:
    fix_filter = FixFilter(survey_config)
    assert fix_filter.decide(make_fix(0.0, 0.0, accuracy=50.0), None) is FilterDecision.REJECT_LOW_ACCURACY
    assert fix_filter.skipped_count == 0


def test_non_finite_readings_rejected_before_accuracy(survey_config) -> None:
    fix_filter = FixFilter(survey_config)
    previous = _recorded(0.0, 0.0)
    nan = float("nan")
    for fix in (
        make_fix(nan, 0.0),
        make_fix(0.0, float("inf")),
        make_fix(0.001, 0.0, accuracy=nan),
    ):
        assert fix_filter.evaluate(fix, previous) is FilterDecision.REJECT_INVALID
    assert fix_filter.skip_reasons[FilterDecision.REJECT_INVALID] == 3
