"""
Revenue Leak Calculator: Loss Engine
Four independent annual-loss estimators (lead response, failed payments,
self-serve conversion gap, manual process) plus the bounded total.

Each category is capped as a fraction of ARR; the total is capped at 20% of
ARR with categories scaled proportionally when that cap binds.
"""
import math
from leak_engines.benchmarks import (find_deal_tier, get_industry, select_recovery_system,
                                     RECOVERY_SYSTEMS, frozen)

CATEGORY_CAPS = frozen({
    'leadResponseLoss': 0.08,
    'failedPaymentLoss': 0.06,
    'selfServeGapLoss': 0.12,
    'processInefficiencyLoss': 0.05,
})
TOTAL_CAP = 0.20

# (upper minutes, effectiveness at upper) breakpoints of the response curve
RESPONSE_CURVE = ((5, 1.00), (30, 0.80), (60, 0.65), (240, 0.40))
EFFECTIVENESS_FLOOR = 0.40
MAX_TIER_PENALTY = 0.05

SELF_SERVE_BENCHMARK_CEILING = 8.0
SELF_SERVE_OPTIMAL_RATE = 15.0
MAX_CONVERSION_GAP = 5.0
ARPU_RANGE = (20.0, 200.0)

AUTOMATION_POTENTIAL = 0.70
REVENUE_GEN_POTENTIAL = 0.32


def _emit(trace, step, **values):
    if trace is not None:
        trace(step, values)


def _bounded(raw, cap):
    # Overflowed products (inf, or inf x 0 = nan) count as hitting the cap
    return cap if not math.isfinite(raw) else min(raw, cap)


def response_effectiveness(minutes):
    """Share of lead value still captured after `minutes` of response delay."""
    if minutes <= RESPONSE_CURVE[0][0]:
        return 1.0
    lo_m, lo_eff = RESPONSE_CURVE[0]
    for hi_m, hi_eff in RESPONSE_CURVE[1:]:
        if minutes <= hi_m:
            return lo_eff - (minutes - lo_m) / (hi_m - lo_m) * (lo_eff - hi_eff)
        lo_m, lo_eff = hi_m, hi_eff
    return EFFECTIVENESS_FLOOR


def lead_response_loss(inputs, trace=None):
    arr = inputs['currentARR']
    minutes = inputs['leadResponseTimeHours'] * 60
    tier = find_deal_tier(inputs['averageDealValue'])
    eff = response_effectiveness(minutes)
    penalty = 0.0
    if minutes > tier['optimalResponseMinutes']:
        penalty = min(MAX_TIER_PENALTY, MAX_TIER_PENALTY * (minutes - tier['optimalResponseMinutes']) / 240)
        eff = max(EFFECTIVENESS_FLOOR, eff * (1 - penalty))
    if eff >= 1.0:
        _emit(trace, 'leadResponse', minutes=minutes, tier=tier['name'], penalty=penalty,
              effectiveness=eff, uncapped=0.0, loss=0.0)
        return 0.0
    raw = inputs['monthlyLeads'] * inputs['averageDealValue'] * (1 - eff) * 12
    loss = _bounded(raw, arr * CATEGORY_CAPS['leadResponseLoss'])
    _emit(trace, 'leadResponse', minutes=minutes, tier=tier['name'], penalty=penalty,
          effectiveness=eff, uncapped=raw, loss=loss)
    return loss


def failed_payment_loss(inputs, system=None, trace=None):
    arr, mrr = inputs['currentARR'], inputs['monthlyMRR']
    system = system or select_recovery_system(arr, mrr)
    profile = RECOVERY_SYSTEMS[system]
    raw = (mrr * inputs['failedPaymentRatePercent'] / 100
           * (1 - profile['recoveryRate']) * (1 - profile['retrySuccessRate']) * 12)
    loss = _bounded(raw, arr * CATEGORY_CAPS['failedPaymentLoss'])
    _emit(trace, 'failedPayment', system=system, uncapped=raw, loss=loss)
    return loss


def self_serve_gap_loss(inputs, trace=None):
    signups, mrr = inputs['monthlyFreeSignups'], inputs['monthlyMRR']
    rate = inputs['freeToPaidConversionRatePercent']
    if signups <= 0 or mrr <= 0 or rate >= SELF_SERVE_OPTIMAL_RATE:
        _emit(trace, 'selfServeGap', skipped=True, loss=0.0)
        return 0.0
    benchmark = min(get_industry(inputs['industry'])['conversionRatePercent'], SELF_SERVE_BENCHMARK_CEILING)
    gap = max(0.0, min(benchmark - rate, MAX_CONVERSION_GAP))
    conversions = signups * rate / 100
    # No conversions is the limit of mrr / conversions, i.e. the ARPU ceiling
    arpu = mrr / conversions if conversions > 0 else ARPU_RANGE[1]
    arpu = max(ARPU_RANGE[0], min(ARPU_RANGE[1], arpu))
    raw = signups * gap / 100 * arpu * 12
    loss = _bounded(raw, min(inputs['currentARR'] * CATEGORY_CAPS['selfServeGapLoss'], mrr * 12))
    _emit(trace, 'selfServeGap', benchmark=benchmark, gap=gap, arpu=arpu, uncapped=raw, loss=loss)
    return loss


def process_inefficiency_loss(inputs, trace=None):
    direct = inputs['manualHoursPerWeek'] * 52 * inputs['hourlyRate'] * AUTOMATION_POTENTIAL
    opportunity = direct * REVENUE_GEN_POTENTIAL
    raw = direct + opportunity
    loss = _bounded(raw, inputs['currentARR'] * CATEGORY_CAPS['processInefficiencyLoss'])
    _emit(trace, 'processInefficiency', direct=direct, opportunity=opportunity, uncapped=raw, loss=loss)
    return loss


def calculate_losses(inputs, recovery_system=None, trace=None):
    """Assemble the loss breakdown from sanitized inputs.

    `recovery_system` forces a failed-payment tier; otherwise it is picked from ARR/MRR.
    """
    arr = inputs['currentARR']
    system = recovery_system or select_recovery_system(arr, inputs['monthlyMRR'])
    if system not in RECOVERY_SYSTEMS:
        raise ValueError(f"Unknown recovery system: {system!r}")
    breakdown = {
        'leadResponseLoss': lead_response_loss(inputs, trace),
        'failedPaymentLoss': failed_payment_loss(inputs, system, trace),
        'selfServeGapLoss': self_serve_gap_loss(inputs, trace),
        'processInefficiencyLoss': process_inefficiency_loss(inputs, trace),
    }
    capped = [k for k, ratio in CATEGORY_CAPS.items() if arr * ratio > 0 and breakdown[k] >= arr * ratio]
    raw_total = sum(breakdown.values())
    total_cap = arr * TOTAL_CAP
    if raw_total > total_cap:
        scale = total_cap / raw_total if raw_total > 0 else 0
        breakdown = {k: v * scale for k, v in breakdown.items()}
        capped.append('totalLoss')
    breakdown['totalLoss'] = min(raw_total, total_cap)
    breakdown['rawTotalLoss'] = raw_total
    breakdown['recoverySystem'] = system
    breakdown['capped'] = capped
    _emit(trace, 'totalLoss', rawTotal=raw_total, total=breakdown['totalLoss'], capped=capped)
    return breakdown
