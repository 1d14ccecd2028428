"""
Revenue Leak Calculator: Input Sanitizer
Clamps and defaults raw form fields into the engine's safe numeric ranges.
Never raises; garbage in always yields a valid input dict.
"""
import math
from leak_engines.benchmarks import INDUSTRY_BENCHMARKS, frozen

# field -> (default, lo, hi)
FIELD_RULES = frozen({
    'currentARR':                       (0,    0,    None),
    'monthlyMRR':                       (0,    0,    None),
    'monthlyLeads':                     (0,    0,    None),
    'averageDealValue':                 (5000, 100,  None),
    'leadResponseTimeHours':            (24,   0.1,  168),
    'monthlyFreeSignups':               (0,    0,    None),
    'freeToPaidConversionRatePercent':  (2,    0,    25),
    'failedPaymentRatePercent':         (5,    0,    30),
    'manualHoursPerWeek':               (10,   0,    80),
    'hourlyRate':                       (75,   25,   500),
})

# Legacy form names and persisted snake_case columns
FIELD_ALIASES = frozen({
    'current_arr': 'currentARR', 'arr': 'currentARR',
    'monthly_mrr': 'monthlyMRR', 'mrr': 'monthlyMRR',
    'monthly_leads': 'monthlyLeads',
    'average_deal_value': 'averageDealValue',
    'leadResponseTime': 'leadResponseTimeHours', 'lead_response_time': 'leadResponseTimeHours',
    'monthly_free_signups': 'monthlyFreeSignups',
    'freeToPaidConversionRate': 'freeToPaidConversionRatePercent',
    'freeToLaidConversion': 'freeToPaidConversionRatePercent',
    'freeToPaidConversion': 'freeToPaidConversionRatePercent',
    'free_to_paid_conversion': 'freeToPaidConversionRatePercent',
    'failedPaymentRate': 'failedPaymentRatePercent', 'failed_payment_rate': 'failedPaymentRatePercent',
    'manualHours': 'manualHoursPerWeek', 'manual_hours': 'manualHoursPerWeek',
    'hourly_rate': 'hourlyRate',
})

DEFAULT_INDUSTRY = 'other'
TRUTHY = ('1', 'true', 'yes', 'y', 'on')


def clamp(v, lo, hi):
    return max(lo, min(hi, v))


def to_number(value):
    """Parse a raw field to a finite float, or None when absent/garbage.
    Accepts display strings like '$1,200' or '4.5%'.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        cleaned = value.strip().replace('$', '').replace(',', '').replace('%', '')
        if not cleaned:
            return None
        try:
            value = float(cleaned)
        except (ValueError, OverflowError):
            return None
    try:
        num = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return num if math.isfinite(num) else None


def to_bool(value):
    """Form and workbook flags: real booleans, 'yes'/'true'/'1' strings, non-zero numbers."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY
    return bool(to_number(value))


def normalize_industry(value):
    if not isinstance(value, str):
        return DEFAULT_INDUSTRY
    key = value.strip().lower().replace(' ', '-').replace('_', '-')
    return key if key in INDUSTRY_BENCHMARKS else DEFAULT_INDUSTRY


def _sanitize_field(field, raw_value):
    default, lo, hi = FIELD_RULES[field]
    num = to_number(raw_value)
    if num is None:
        return float(default)
    if field == 'leadResponseTimeHours' and num <= 0:
        # Zero means instant response; keep it so the curve yields no loss
        return 0.0
    return float(clamp(num, lo, hi if hi is not None else math.inf))


def sanitize(raw):
    raw = raw if isinstance(raw, dict) else {}
    merged = {}
    for key, value in raw.items():
        canonical = FIELD_ALIASES.get(key, key)
        # Canonical names win over aliases when both are supplied
        if canonical in merged and key != canonical:
            continue
        merged[canonical] = value
    inputs = {field: _sanitize_field(field, merged.get(field)) for field in FIELD_RULES}
    inputs['industry'] = normalize_industry(merged.get('industry'))
    return inputs
