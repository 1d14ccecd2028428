"""
Revenue Leak Calculator: Confidence Engine
Derives company-readiness factors from ARR, scores estimate confidence from
risk flags, and applies the confidence multiplier to recovery projections.
"""
from leak_engines.benchmarks import frozen
from leak_engines.sanitizer import to_number

CONFIDENCE_MULTIPLIER = frozen({'high': 0.90, 'medium': 0.75, 'low': 0.60})
LOWER_BOUND_FACTOR = 0.75
UPPER_BOUND_FACTOR = 1.15

RISK_FLAG_LABELS = frozen({
    'highLossRatio': 'Estimated loss exceeds 25% of ARR',
    'smallCompany': 'ARR below $1M limits benchmark reliability',
    'selfServeHeavy': 'Self-serve gap is over 40% of total loss',
    'processHeavy': 'Process inefficiency is over 30% of total loss',
})


def derive_confidence_factors(arr):
    if arr > 10_000_000:
        size, maturity, change = 'enterprise', 'advanced', 'high'
    elif arr > 1_000_000:
        size, maturity, change = 'scaleup', 'intermediate', 'medium'
    else:
        size, maturity, change = 'startup', 'basic', 'low'
    return {
        'companySize': size,
        'currentMaturity': maturity,
        'resourceAvailable': arr > 1_000_000,
        'changeManagementCapability': change,
    }


def score_confidence(losses, arr):
    raw_total = losses.get('rawTotalLoss', losses.get('totalLoss', 0))
    total = losses.get('totalLoss', 0)
    loss_ratio = raw_total / arr if arr > 0 else 0
    self_serve_share = losses.get('selfServeGapLoss', 0) / total if total > 0 else 0
    process_share = losses.get('processInefficiencyLoss', 0) / total if total > 0 else 0
    checks = {
        'highLossRatio': loss_ratio > 0.25,
        'smallCompany': arr < 1_000_000,
        'selfServeHeavy': self_serve_share > 0.40,
        'processHeavy': process_share > 0.30,
    }
    flags = [k for k, hit in checks.items() if hit]
    level = 'high' if not flags else 'medium' if len(flags) <= 2 else 'low'
    return {
        'level': level,
        'multiplier': CONFIDENCE_MULTIPLIER[level],
        'flags': flags,
        'reasons': [RISK_FLAG_LABELS[f] for f in flags],
    }


def _scaled(projection, multiplier):
    out = dict(projection)
    out['categoryRecovery'] = {k: v * multiplier for k, v in projection['categoryRecovery'].items()}
    out['totalRecovery'] = projection['totalRecovery'] * multiplier
    return out


def apply_confidence(projections, confidence):
    """Scale every recovery amount by the confidence multiplier.

    Rates are left untouched: the multiplier is applied after rate capping.
    Returns (adjusted projections, bounds).
    """
    m = confidence['multiplier']
    adjusted = {name: _scaled(p, m) for name, p in projections.items()}
    bounds = {
        'lower': adjusted['conservative']['totalRecovery'] * LOWER_BOUND_FACTOR,
        'upper': adjusted['bestCase']['totalRecovery'] * UPPER_BOUND_FACTOR,
    }
    return adjusted, bounds


def validate_recovery_assumptions(data):
    """Check whether 70% / 85% recovery targets are plausible for this company."""
    reasons = []
    can70 = can85 = True
    gross = to_number(data.get('grossRetention'))
    net = to_number(data.get('netRetention'))
    csat = to_number(data.get('customerSatisfaction'))
    if gross and gross < 80:
        can70 = False
        reasons.append('Gross retention below 80% threshold')
    if csat and csat < 7:
        can70 = False
        reasons.append('Customer satisfaction below 7/10 threshold')
    if not data.get('hasRevOps'):
        can70 = False
        reasons.append('RevOps processes not implemented')
    if net and net < 100:
        can85 = False
        reasons.append('Net retention below 100% threshold')
    if gross and gross < 85:
        can85 = False
        reasons.append('Gross retention below 85% threshold for advanced recovery')
    if (to_number(data.get('currentARR')) or 0) < 1_000_000:
        can85 = False
        reasons.append('Company size may limit advanced recovery capabilities')
    return {'canAchieve70': can70, 'canAchieve85': can85, 'reasons': reasons}
