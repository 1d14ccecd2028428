"""
Revenue Leak Calculator: Recovery Projection Engine
Multi-factor recovery-rate model per leak category, projected under three
scenarios (conservative / optimistic / bestCase), plus the 3-year ramp.
"""
from leak_engines.benchmarks import (RECOVERY_MATRIX, LOSS_CATEGORIES, LOSS_KEYS,
                                     COMPANY_SIZE_MULTIPLIER, CHANGE_MANAGEMENT_MULTIPLIER,
                                     MATURITY_MULTIPLIER, DIFFICULTY_PENALTY, frozen)

SCENARIOS = ('conservative', 'optimistic', 'bestCase')
SCENARIO_MULTIPLIER = frozen({'conservative': 0.85, 'optimistic': 1.0, 'bestCase': 1.0})
MAX_RATE = frozen({'conservative': 0.65, 'optimistic': 0.80, 'bestCase': 0.80})
RESOURCE_PENALTY = 0.80
SIMULTANEOUS_INITIATIVES_PENALTY = 0.90

IDEAL_FACTORS = frozen({
    'resourceAvailable': True,
    'changeManagementCapability': 'high',
    'currentMaturity': 'advanced',
})

# Share of conservative recovery realised per year
RECOVERY_RAMP = frozen({'year1': 0.25, 'year2': 0.70, 'year3': 1.00})


def _lookup(table, key, label):
    if key not in table:
        raise ValueError(f"Unknown {label}: {key!r}")
    return table[key]


def recovery_rate(category, factors, scenario):
    entry = RECOVERY_MATRIX[category]
    rate = entry['baseRecoveryRate']
    rate *= _lookup(COMPANY_SIZE_MULTIPLIER, factors['companySize'], 'company size')
    rate *= _lookup(CHANGE_MANAGEMENT_MULTIPLIER, factors['changeManagementCapability'], 'change capability')
    rate *= SCENARIO_MULTIPLIER[scenario]
    rate *= DIFFICULTY_PENALTY[entry['difficulty']]
    rate *= 1.0 if factors['resourceAvailable'] else RESOURCE_PENALTY
    rate *= _lookup(MATURITY_MULTIPLIER, factors['currentMaturity'], 'maturity')
    rate *= SIMULTANEOUS_INITIATIVES_PENALTY
    return max(0.0, min(MAX_RATE[scenario], rate))


def project_recovery(losses, factors, scenario):
    """Recovery projection for one scenario.

    bestCase always swaps in IDEAL_FACTORS (company size is kept) regardless of
    the caller's factors. Missing or zero loss categories recover nothing.
    """
    _lookup(SCENARIO_MULTIPLIER, scenario, 'scenario')
    if scenario == 'bestCase':
        factors = dict(factors, **IDEAL_FACTORS)
    losses = losses or {}
    category_recovery, impl_factor, risk_adj = {}, {}, {}
    for cat in LOSS_CATEGORIES:
        loss = losses.get(LOSS_KEYS[cat], 0) or 0
        if loss <= 0:
            category_recovery[cat], impl_factor[cat], risk_adj[cat] = 0.0, 0.0, 1.0
            continue
        rate = recovery_rate(cat, factors, scenario)
        category_recovery[cat] = loss * rate
        impl_factor[cat] = rate
        risk_adj[cat] = 1 - rate
    return {
        'scenario': scenario,
        'maxRate': MAX_RATE[scenario],
        'totalRecovery': sum(category_recovery.values()),
        'categoryRecovery': category_recovery,
        'implementationFactor': impl_factor,
        'riskAdjustment': risk_adj,
    }


def project_all_scenarios(losses, factors):
    return {s: project_recovery(losses, factors, s) for s in SCENARIOS}


def build_recovery_timeline(total_recovery):
    return {year: total_recovery * share for year, share in RECOVERY_RAMP.items()}
