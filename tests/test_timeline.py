import pytest

from leak_engines.sanitizer import sanitize
from leak_engines.timeline import (PHASES, generate_timeline, estimate_investment, phase_labor_cost,
                                   calculate_roi, MAX_PAYBACK_MONTHS)


def _recovery(**by_category):
    return {'categoryRecovery': by_category}


def test_phases_clear_their_thresholds():
    inputs = sanitize({'currentARR': 1_000_000})
    phases = generate_timeline(_recovery(leadResponse=30_000, failedPayment=10_000,
                                         selfServeGap=30_000, processInefficiency=25_000), inputs)
    assert [p['id'] for p in phases] == ['lead-response', 'self-serve', 'process-automation']
    assert [p['startMonth'] for p in phases] == sorted(p['startMonth'] for p in phases)


def test_threshold_is_exclusive():
    inputs = sanitize({'currentARR': 1_000_000})
    assert generate_timeline(_recovery(leadResponse=25_000), inputs) == []


def test_threshold_scales_with_arr():
    inputs = sanitize({'currentARR': 20_000_000})
    assert generate_timeline(_recovery(leadResponse=90_000), inputs) == []
    assert len(generate_timeline(_recovery(leadResponse=110_000), inputs)) == 1


def test_empty_recovery_yields_no_phases():
    inputs = sanitize({'currentARR': 1_000_000})
    assert generate_timeline({}, inputs) == []
    assert generate_timeline(None, inputs) == []


def test_phases_are_independent_copies():
    inputs = sanitize({'currentARR': 1_000_000})
    phase = generate_timeline(_recovery(leadResponse=50_000), inputs)[0]
    phase['actions'][0]['weeks'] = 99
    phase['dependencies'].append('Board approval')
    assert PHASES[0]['actions'][0]['weeks'] == 2
    assert phase['dependencies'][:2] == ['CRM integration', 'Sales team training']
    assert 'threshold' not in phase
    assert phase['recoveryPotential'] == 50_000


def test_lead_phase_labor_cost():
    assert phase_labor_cost(PHASES[0], 'saas-software') == pytest.approx(56_000)
    assert phase_labor_cost(PHASES[0], 'healthcare') == pytest.approx(75_600)


def test_investment_for_single_quick_phase():
    inputs = sanitize({'currentARR': 10_000_000, 'industry': 'saas-software'})
    phases = generate_timeline(_recovery(leadResponse=1_000_000), inputs)
    investment = estimate_investment(phases, inputs)
    assert investment['implementationCost'] == pytest.approx(71_000)
    assert investment['ongoingCost'] == pytest.approx(20_600)
    assert investment['totalAnnualInvestment'] == pytest.approx(71_000 / 3 + 20_600)
    assert investment['paybackMonths'] == 1
    assert investment['breakdown']['infrastructure'] == 0
    assert investment['capScale'] == 1.0


def test_regulated_industry_pays_compliance():
    inputs = sanitize({'currentARR': 10_000_000, 'industry': 'healthcare'})
    phases = generate_timeline(_recovery(leadResponse=1_000_000), inputs)
    breakdown = estimate_investment(phases, inputs)['breakdown']
    assert breakdown['compliance'] == pytest.approx(0.15 * breakdown['labor'])


def test_technical_phase_pays_infrastructure():
    inputs = sanitize({'currentARR': 10_000_000})
    phases = generate_timeline(_recovery(selfServeGap=5_000_000), inputs)
    breakdown = estimate_investment(phases, inputs)['breakdown']
    assert breakdown['infrastructure'] == pytest.approx(0.10 * breakdown['labor'])


def test_implementation_cost_capped_by_recovery():
    inputs = sanitize({'currentARR': 1_000_000})
    phases = generate_timeline(_recovery(leadResponse=30_000), inputs)
    investment = estimate_investment(phases, inputs)
    assert investment['implementationCost'] == pytest.approx(12_000)
    assert investment['capScale'] == pytest.approx(12_000 / 61_000)
    assert investment['paybackMonths'] == 5
    assert investment['paybackMonths'] <= MAX_PAYBACK_MONTHS


def test_no_phases_no_investment():
    investment = estimate_investment([], sanitize({}))
    assert investment['implementationCost'] == 0
    assert investment['totalAnnualInvestment'] == 0
    assert investment['paybackMonths'] == 0


@pytest.mark.parametrize('recovery,investment,level,adjusted,category', [
    (100_000, 50_000, 'high', 100, 'Strong Return'),
    (100_000, 50_000, 'medium', 80, 'Strong Return'),
    (100_000, 50_000, 'low', 60, 'Moderate Return'),
    (0, 50_000, 'high', -100, 'Low Return'),
    (1_000_000, 1_000, 'high', 300, 'Exceptional Return'),
])
def test_roi(recovery, investment, level, adjusted, category):
    roi = calculate_roi(recovery, investment, level)
    assert roi['confidenceAdjustedROI'] == pytest.approx(adjusted)
    assert roi['category'] == category


def test_roi_without_investment_is_invalid():
    assert calculate_roi(100_000, 0, 'high') == {'roi': 0.0, 'confidenceAdjustedROI': 0.0, 'category': 'Invalid'}


def test_phase_templates_are_read_only():
    with pytest.raises(TypeError):
        PHASES[0]['startMonth'] = 9
    with pytest.raises(TypeError):
        PHASES[0] = {}
