"""
Revenue Leak Calculator: Input Consistency Checks
Non-fatal warnings surfaced next to the results; they never alter the math.
"""
from leak_engines.benchmarks import frozen

CAP_MESSAGES = frozen({
    'leadResponseLoss': 'Lead response loss capped at 8% of ARR',
    'failedPaymentLoss': 'Failed payment loss capped at 6% of ARR',
    'selfServeGapLoss': 'Self-serve gap loss capped at 12% of ARR',
    'processInefficiencyLoss': 'Process inefficiency loss capped at 5% of ARR',
    'totalLoss': 'Total loss capped at 20% of ARR; categories scaled proportionally',
})


def check_input_consistency(inputs, losses=None):
    warnings = []
    arr = inputs['currentARR']
    if arr > 0:
        lead_potential = inputs['monthlyLeads'] * inputs['averageDealValue'] * 12
        if lead_potential > arr * 10:
            warnings.append({'code': 'leadPotential',
                             'message': 'Lead potential significantly exceeds current ARR - verify inputs'})
        if inputs['monthlyMRR'] > 0 and abs(inputs['monthlyMRR'] * 12 - arr) > arr * 0.5:
            warnings.append({'code': 'mrrArrMismatch',
                             'message': 'MRR and ARR values appear inconsistent - verify inputs'})
    elif inputs['monthlyMRR'] > 0:
        warnings.append({'code': 'missingARR',
                         'message': 'ARR is zero while MRR is reported; all losses are capped at $0'})
    for key in (losses or {}).get('capped', []):
        warnings.append({'code': f'capped.{key}', 'message': CAP_MESSAGES[key]})
    return warnings
