import json

import pytest

from leak_engines.losses import CATEGORY_CAPS, TOTAL_CAP
from leak_engines.pipeline import compute_results
from leak_engines.recovery import MAX_RATE

RESULT_KEYS = {
    'inputs', 'lossBreakdown', 'confidenceFactors', 'recoveryProjection', 'confidence',
    'leadScore', 'timeline', 'investment', 'roi', 'recoveryTimeline', 'priorityActions',
    'quickWins', 'executiveSummary', 'benchmarkComparison', 'warnings',
}

GRID = [
    {},
    {'currentARR': 250_000, 'monthlyLeads': 40, 'averageDealValue': 3000, 'leadResponseTimeHours': 12},
    {'currentARR': 3_000_000, 'monthlyMRR': 250_000, 'monthlyFreeSignups': 4000,
     'freeToPaidConversionRatePercent': 1.5, 'industry': 'education'},
    {'currentARR': 25_000_000, 'monthlyMRR': 2_000_000, 'monthlyLeads': 800, 'averageDealValue': 60_000,
     'leadResponseTimeHours': 72, 'manualHoursPerWeek': 60, 'hourlyRate': 150, 'industry': 'financial-services'},
    {'currentARR': 8_000_000, 'monthlyLeads': 5000, 'averageDealValue': 250_000,
     'leadResponseTimeHours': 168, 'industry': 'healthcare'},
]


def test_result_shape(scenario_inputs):
    results = compute_results(scenario_inputs)
    assert set(results) == RESULT_KEYS
    assert results['lossBreakdown']['totalLoss'] == pytest.approx(148_286)
    assert results['leadScore'] == 48
    assert results['confidence']['level'] == 'high'


def test_deterministic(scenario_inputs):
    first = compute_results(scenario_inputs)
    second = compute_results(dict(scenario_inputs))
    assert first == second
    assert json.dumps(first, sort_keys=True) == json.dumps(second, sort_keys=True)


def test_input_is_not_mutated(scenario_inputs):
    before = dict(scenario_inputs)
    compute_results(scenario_inputs)
    assert scenario_inputs == before


def test_all_zero_input(zero_inputs):
    results = compute_results(zero_inputs)
    assert results['lossBreakdown']['totalLoss'] == 0
    assert results['recoveryProjection']['optimistic']['totalRecovery'] == 0
    assert results['leadScore'] == 13
    assert results['timeline'] == []
    assert results['priorityActions'] == []
    assert results['roi']['category'] == 'Invalid'
    assert results['warnings'] == []


@pytest.mark.parametrize('raw', [None, 'garbage', {'currentARR': 'abc', 'industry': 12}])
def test_garbage_input_never_raises(raw):
    results = compute_results(raw)
    assert results['lossBreakdown']['totalLoss'] == 0


def test_small_company_has_no_phases(scenario_inputs):
    results = compute_results(scenario_inputs)
    assert results['timeline'] == []
    assert results['investment']['implementationCost'] == 0


@pytest.mark.parametrize('raw', GRID)
def test_invariants_hold(raw):
    results = compute_results(raw)
    arr = results['inputs']['currentARR']
    losses = results['lossBreakdown']
    for key, ratio in CATEGORY_CAPS.items():
        assert 0 <= losses[key] <= arr * ratio + 1e-6
    assert losses['totalLoss'] <= arr * TOTAL_CAP + 1e-6

    projection = results['recoveryProjection']
    totals = [projection[s]['totalRecovery'] for s in ('conservative', 'optimistic', 'bestCase')]
    assert totals == sorted(totals)
    for scenario, p in projection.items():
        assert all(0 <= r <= MAX_RATE[scenario] for r in p['implementationFactor'].values())

    assert 0 <= results['leadScore'] <= 100
    starts = [p['startMonth'] for p in results['timeline']]
    assert starts == sorted(starts)
    investment = results['investment']
    recoverable = sum(p['recoveryPotential'] for p in results['timeline'])
    assert investment['implementationCost'] <= recoverable * 0.4 + 1e-6
    assert investment['paybackMonths'] <= 24


def test_large_company_gets_a_plan():
    results = compute_results(GRID[3])
    assert results['timeline']
    assert results['investment']['implementationCost'] > 0
    assert results['roi']['category'] != 'Invalid'


def test_trace_receives_each_stage(scenario_inputs):
    seen = []
    compute_results(scenario_inputs, trace=lambda step, values: seen.append(step))
    for step in ('inputs', 'leadResponse', 'totalLoss', 'recovery', 'confidence', 'timeline'):
        assert step in seen


def test_recovery_system_override(scenario_inputs):
    results = compute_results(scenario_inputs, recovery_system='basic')
    assert results['lossBreakdown']['recoverySystem'] == 'basic'
    with pytest.raises(ValueError):
        compute_results(scenario_inputs, recovery_system='nope')


def test_product_usage_raises_lead_score(scenario_inputs):
    base = compute_results(scenario_inputs)['leadScore']
    assert compute_results(dict(scenario_inputs, hasProductUsage=True))['leadScore'] == base + 15


def test_overflowing_inputs_stay_finite():
    results = compute_results({'currentARR': 1e6, 'monthlyLeads': 1e300,
                               'averageDealValue': 1e300, 'leadResponseTimeHours': 0})
    assert results['lossBreakdown']['leadResponseLoss'] == 0
    json.dumps(results, allow_nan=False)
    results = compute_results({'currentARR': 1e6, 'monthlyLeads': 1e300,
                               'averageDealValue': 1e300, 'leadResponseTimeHours': 24})
    assert results['lossBreakdown']['leadResponseLoss'] == pytest.approx(80_000)
    json.dumps(results, allow_nan=False)
