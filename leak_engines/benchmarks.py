"""
Revenue Leak Calculator: Benchmark Tables
Static reference data shared by every engine. Tables are frozen at import
(MappingProxyType / tuples) so concurrent callers can share them safely.
"""
import math
from types import MappingProxyType


def frozen(obj):
    if isinstance(obj, dict):
        return MappingProxyType({k: frozen(v) for k, v in obj.items()})
    if isinstance(obj, list):
        return tuple(frozen(v) for v in obj)
    return obj


def thaw(obj):
    """Plain dict/list copy of a frozen table, for JSON responses."""
    if isinstance(obj, MappingProxyType) or isinstance(obj, dict):
        return {k: thaw(v) for k, v in obj.items()}
    if isinstance(obj, tuple):
        return [thaw(v) for v in obj]
    if isinstance(obj, float) and math.isinf(obj):
        return None
    return obj


# ── Deal size tiers (ordered; first containing tier wins) ──
DEAL_SIZE_TIERS = frozen([
    {'name': 'SMB',        'minValue': 0,      'maxValue': 25000,    'optimalResponseMinutes': 5},
    {'name': 'Mid-Market', 'minValue': 25000,  'maxValue': 100000,   'optimalResponseMinutes': 15},
    {'name': 'Enterprise', 'minValue': 100000, 'maxValue': math.inf, 'optimalResponseMinutes': 60},
])

INDUSTRY_BENCHMARKS = frozen({
    'saas-software':           {'conversionRatePercent': 4.2, 'multiplier': 1.5, 'displayName': 'SaaS & Software'},
    'technology-it':           {'conversionRatePercent': 4.2, 'multiplier': 1.5, 'displayName': 'Technology & IT'},
    'financial-services':      {'conversionRatePercent': 3.8, 'multiplier': 1.3, 'displayName': 'Financial Services'},
    'consulting-professional': {'conversionRatePercent': 3.4, 'multiplier': 1.0, 'displayName': 'Professional Services'},
    'healthcare':              {'conversionRatePercent': 3.2, 'multiplier': 1.2, 'displayName': 'Healthcare'},
    'marketing-advertising':   {'conversionRatePercent': 3.0, 'multiplier': 1.1, 'displayName': 'Marketing & Advertising'},
    'ecommerce-retail':        {'conversionRatePercent': 2.8, 'multiplier': 1.0, 'displayName': 'E-commerce & Retail'},
    'manufacturing':           {'conversionRatePercent': 2.8, 'multiplier': 1.0, 'displayName': 'Manufacturing'},
    'education':               {'conversionRatePercent': 2.6, 'multiplier': 1.0, 'displayName': 'Education'},
    'other':                   {'conversionRatePercent': 3.4, 'multiplier': 1.0, 'displayName': 'Other'},
})

RECOVERY_SYSTEMS = frozen({
    'basic':         {'name': 'Basic System',         'recoveryRate': 0.35, 'retrySuccessRate': 0.20},
    'advanced':      {'name': 'Advanced System',      'recoveryRate': 0.70, 'retrySuccessRate': 0.35},
    'best-in-class': {'name': 'Best-in-Class System', 'recoveryRate': 0.85, 'retrySuccessRate': 0.50},
})

LOSS_CATEGORIES = ('leadResponse', 'failedPayment', 'selfServeGap', 'processInefficiency')

# category -> loss key in the breakdown
LOSS_KEYS = MappingProxyType({
    'leadResponse': 'leadResponseLoss',
    'failedPayment': 'failedPaymentLoss',
    'selfServeGap': 'selfServeGapLoss',
    'processInefficiency': 'processInefficiencyLoss',
})

RECOVERY_MATRIX = frozen({
    'leadResponse': {
        'baseRecoveryRate': 0.65, 'difficulty': 'low', 'timeToValueMonths': 2,
        'dependencies': ['CRM integration', 'Sales team training'],
        'riskFactors': ['Sales team adoption', 'Lead routing accuracy'],
    },
    'failedPayment': {
        'baseRecoveryRate': 0.70, 'difficulty': 'low', 'timeToValueMonths': 1,
        'dependencies': ['Payment processor integration'],
        'riskFactors': ['Processor retry limits', 'Card network rules'],
    },
    'selfServeGap': {
        'baseRecoveryRate': 0.55, 'difficulty': 'high', 'timeToValueMonths': 6,
        'dependencies': ['Product development', 'UX research'],
        'riskFactors': ['Product roadmap competition', 'Experiment velocity', 'User behaviour change'],
    },
    'processInefficiency': {
        'baseRecoveryRate': 0.75, 'difficulty': 'medium', 'timeToValueMonths': 4,
        'dependencies': ['Operations team', 'Technical resources'],
        'riskFactors': ['Change resistance', 'Integration complexity'],
    },
})

COMPANY_SIZE_MULTIPLIER = frozen({'startup': 0.85, 'scaleup': 1.0, 'enterprise': 1.1})
CHANGE_MANAGEMENT_MULTIPLIER = frozen({'low': 0.85, 'medium': 1.0, 'high': 1.1})
MATURITY_MULTIPLIER = frozen({'basic': 0.9, 'intermediate': 1.0, 'advanced': 1.1})
DIFFICULTY_PENALTY = frozen({'low': 1.0, 'medium': 0.90, 'high': 0.75})

# ── Typical metrics per industry (form smart defaults / comparison baseline) ──
INDUSTRY_DEFAULTS = frozen({
    'saas-software':           {'monthlyLeads': 850,  'averageDealValue': 12000, 'leadResponseTimeHours': 4,  'monthlyFreeSignups': 2400, 'freeToPaidConversionRatePercent': 12, 'monthlyMRR': 85000,  'failedPaymentRatePercent': 4.2, 'manualHoursPerWeek': 32, 'hourlyRate': 85},
    'technology-it':           {'monthlyLeads': 650,  'averageDealValue': 18000, 'leadResponseTimeHours': 6,  'monthlyFreeSignups': 1800, 'freeToPaidConversionRatePercent': 8,  'monthlyMRR': 120000, 'failedPaymentRatePercent': 3.8, 'manualHoursPerWeek': 28, 'hourlyRate': 95},
    'marketing-advertising':   {'monthlyLeads': 1200, 'averageDealValue': 6500,  'leadResponseTimeHours': 2,  'monthlyFreeSignups': 3500, 'freeToPaidConversionRatePercent': 15, 'monthlyMRR': 45000,  'failedPaymentRatePercent': 5.1, 'manualHoursPerWeek': 40, 'hourlyRate': 75},
    'financial-services':      {'monthlyLeads': 420,  'averageDealValue': 35000, 'leadResponseTimeHours': 8,  'monthlyFreeSignups': 800,  'freeToPaidConversionRatePercent': 6,  'monthlyMRR': 180000, 'failedPaymentRatePercent': 2.8, 'manualHoursPerWeek': 25, 'hourlyRate': 125},
    'consulting-professional': {'monthlyLeads': 320,  'averageDealValue': 45000, 'leadResponseTimeHours': 12, 'monthlyFreeSignups': 600,  'freeToPaidConversionRatePercent': 5,  'monthlyMRR': 220000, 'failedPaymentRatePercent': 3.2, 'manualHoursPerWeek': 35, 'hourlyRate': 150},
    'ecommerce-retail':        {'monthlyLeads': 2800, 'averageDealValue': 2500,  'leadResponseTimeHours': 1,  'monthlyFreeSignups': 8500, 'freeToPaidConversionRatePercent': 18, 'monthlyMRR': 28000,  'failedPaymentRatePercent': 6.8, 'manualHoursPerWeek': 45, 'hourlyRate': 55},
    'healthcare':              {'monthlyLeads': 280,  'averageDealValue': 28000, 'leadResponseTimeHours': 24, 'monthlyFreeSignups': 450,  'freeToPaidConversionRatePercent': 4,  'monthlyMRR': 150000, 'failedPaymentRatePercent': 2.1, 'manualHoursPerWeek': 30, 'hourlyRate': 110},
    'manufacturing':           {'monthlyLeads': 180,  'averageDealValue': 85000, 'leadResponseTimeHours': 48, 'monthlyFreeSignups': 200,  'freeToPaidConversionRatePercent': 3,  'monthlyMRR': 380000, 'failedPaymentRatePercent': 1.8, 'manualHoursPerWeek': 22, 'hourlyRate': 95},
    'education':               {'monthlyLeads': 950,  'averageDealValue': 8500,  'leadResponseTimeHours': 6,  'monthlyFreeSignups': 4200, 'freeToPaidConversionRatePercent': 14, 'monthlyMRR': 65000,  'failedPaymentRatePercent': 4.5, 'manualHoursPerWeek': 38, 'hourlyRate': 65},
    'other':                   {'monthlyLeads': 600,  'averageDealValue': 15000, 'leadResponseTimeHours': 6,  'monthlyFreeSignups': 1500, 'freeToPaidConversionRatePercent': 10, 'monthlyMRR': 75000,  'failedPaymentRatePercent': 4.0, 'manualHoursPerWeek': 35, 'hourlyRate': 85},
})

BEST_IN_CLASS_TARGETS = frozen({
    'saas-software':           {'leadResponseTimeMinutes': 15,  'freeToPaidConversionRatePercent': 30, 'failedPaymentRatePercent': 0.8, 'manualHoursPerWeek': 8},
    'technology-it':           {'leadResponseTimeMinutes': 30,  'freeToPaidConversionRatePercent': 25, 'failedPaymentRatePercent': 0.5, 'manualHoursPerWeek': 6},
    'marketing-advertising':   {'leadResponseTimeMinutes': 10,  'freeToPaidConversionRatePercent': 35, 'failedPaymentRatePercent': 1.2, 'manualHoursPerWeek': 12},
    'financial-services':      {'leadResponseTimeMinutes': 60,  'freeToPaidConversionRatePercent': 20, 'failedPaymentRatePercent': 0.3, 'manualHoursPerWeek': 5},
    'consulting-professional': {'leadResponseTimeMinutes': 120, 'freeToPaidConversionRatePercent': 18, 'failedPaymentRatePercent': 0.4, 'manualHoursPerWeek': 8},
    'ecommerce-retail':        {'leadResponseTimeMinutes': 5,   'freeToPaidConversionRatePercent': 40, 'failedPaymentRatePercent': 1.5, 'manualHoursPerWeek': 15},
    'healthcare':              {'leadResponseTimeMinutes': 240, 'freeToPaidConversionRatePercent': 15, 'failedPaymentRatePercent': 0.2, 'manualHoursPerWeek': 6},
    'manufacturing':           {'leadResponseTimeMinutes': 480, 'freeToPaidConversionRatePercent': 12, 'failedPaymentRatePercent': 0.1, 'manualHoursPerWeek': 4},
    'education':               {'leadResponseTimeMinutes': 20,  'freeToPaidConversionRatePercent': 28, 'failedPaymentRatePercent': 1.0, 'manualHoursPerWeek': 10},
    'other':                   {'leadResponseTimeMinutes': 30,  'freeToPaidConversionRatePercent': 25, 'failedPaymentRatePercent': 0.8, 'manualHoursPerWeek': 8},
})

# ── Implementation costing ──
WORK_TYPES = frozen({
    'quick-optimization':    {'dailyRate': 800,  'teamSize': 2, 'fteFactor': 0.5},
    'tool-implementation':   {'dailyRate': 1000, 'teamSize': 2, 'fteFactor': 0.6},
    'technical-development': {'dailyRate': 1200, 'teamSize': 3, 'fteFactor': 0.7},
    'complex-automation':    {'dailyRate': 1400, 'teamSize': 3, 'fteFactor': 0.8},
})

INDUSTRY_COMPLEXITY = frozen({
    'financial-services': 1.3, 'healthcare': 1.35,
    'saas-software': 1.0, 'technology-it': 1.0, 'marketing-advertising': 1.0,
    'ecommerce-retail': 1.05, 'education': 1.05,
    'consulting-professional': 1.1, 'manufacturing': 1.1,
    'other': 1.0,
})

REGULATED_INDUSTRIES = frozenset({'financial-services', 'healthcare'})


def get_industry(key):
    return INDUSTRY_BENCHMARKS.get(key, INDUSTRY_BENCHMARKS['other'])


def get_industry_defaults(key):
    return INDUSTRY_DEFAULTS.get(key, INDUSTRY_DEFAULTS['other'])


def find_deal_tier(deal_value):
    for tier in DEAL_SIZE_TIERS:
        if tier['minValue'] <= deal_value <= tier['maxValue']:
            return tier
    return DEAL_SIZE_TIERS[0]


def select_recovery_system(arr, mrr):
    if arr >= 10_000_000 or mrr >= 500_000:
        return 'best-in-class'
    if arr >= 1_000_000 or mrr >= 50_000:
        return 'advanced'
    return 'basic'


# metric -> (best-in-class key, lower_is_better)
_COMPARED_METRICS = {
    'leadResponseTimeHours': ('leadResponseTimeMinutes', True),
    'freeToPaidConversionRatePercent': ('freeToPaidConversionRatePercent', False),
    'failedPaymentRatePercent': ('failedPaymentRatePercent', True),
    'manualHoursPerWeek': ('manualHoursPerWeek', True),
}


def compare_to_benchmarks(inputs):
    """Position each operational metric against the industry average and best-in-class.
    status: 'better' (at or beyond average), 'behind', or 'critical' (50%+ worse than average).
    """
    industry = inputs.get('industry', 'other')
    defaults = get_industry_defaults(industry)
    targets = BEST_IN_CLASS_TARGETS.get(industry, BEST_IN_CLASS_TARGETS['other'])
    rows = []
    for metric, (target_key, lower_is_better) in _COMPARED_METRICS.items():
        value = inputs.get(metric, 0)
        average = defaults[metric]
        best = targets[target_key]
        if target_key == 'leadResponseTimeMinutes':
            best = best / 60
        if lower_is_better:
            gap = (value - average) / max(average, 0.01)
        else:
            gap = (average - value) / max(average, 0.01)
        status = 'better' if gap <= 0 else 'critical' if gap > 0.5 else 'behind'
        rows.append({
            'metric': metric, 'value': value, 'industryAverage': average,
            'bestInClass': best, 'lowerIsBetter': lower_is_better,
            'gapPercent': gap * 100, 'status': status,
        })
    return {'industry': industry, 'displayName': get_industry(industry)['displayName'], 'metrics': rows}
