"""
Revenue Leak Calculator: Submission Mapping
Translates between the stored shapes (step-wise form data, snake_case
submission rows) and engine inputs / results.
"""
from leak_engines.benchmarks import frozen

STEPS = ('step_1', 'step_2', 'step_3', 'step_4')

# persisted column -> engine input key
RECORD_FIELDS = frozen({
    'industry': 'industry',
    'current_arr': 'currentARR',
    'monthly_leads': 'monthlyLeads',
    'average_deal_value': 'averageDealValue',
    'lead_response_time': 'leadResponseTimeHours',
    'monthly_free_signups': 'monthlyFreeSignups',
    'free_to_paid_conversion': 'freeToPaidConversionRatePercent',
    'monthly_mrr': 'monthlyMRR',
    'failed_payment_rate': 'failedPaymentRatePercent',
    'manual_hours': 'manualHoursPerWeek',
    'hourly_rate': 'hourlyRate',
})
CONTACT_FIELDS = frozen({'companyName': 'company_name', 'email': 'contact_email'})


def inputs_from_steps(calculator_data):
    """Flatten step_1..step_4 form data; later steps win on shared keys."""
    merged = {}
    for step in STEPS:
        values = (calculator_data or {}).get(step) or {}
        if isinstance(values, dict):
            merged.update(values)
    return merged


def inputs_from_record(record):
    raw = {key: record.get(col) for col, key in RECORD_FIELDS.items() if col in record}
    for flag in ('hasProductUsage', 'engagementScore'):
        if flag in record:
            raw[flag] = record[flag]
    return raw


def _money(value):
    return round(float(value), 2)


def to_submission_record(result, contact=None):
    """Flat persistence payload for a computed result; money rounded to cents."""
    inputs = result['inputs']
    losses = result['lossBreakdown']
    recovery = result['recoveryProjection']
    arr = inputs['currentARR']
    record = {col: inputs[key] for col, key in RECORD_FIELDS.items()}
    record.update({
        'lead_response_loss': _money(losses['leadResponseLoss']),
        'failed_payment_loss': _money(losses['failedPaymentLoss']),
        'selfserve_gap_loss': _money(losses['selfServeGapLoss']),
        'process_inefficiency_loss': _money(losses['processInefficiencyLoss']),
        'total_leak': _money(losses['totalLoss']),
        'recovery_potential_70': _money(recovery['conservative']['totalRecovery']),
        'recovery_potential_85': _money(recovery['optimistic']['totalRecovery']),
        'leak_percentage': _money(losses['totalLoss'] / arr * 100) if arr > 0 else 0,
        'lead_score': result['leadScore'],
        'confidence_level': result['confidence']['level'],
    })
    for src, col in CONTACT_FIELDS.items():
        if contact and contact.get(src):
            record[col] = contact[src]
    return record
