"""
Revenue Leak Calculator: Unified Calculation Pipeline
The single entry point every caller goes through:
  raw inputs -> sanitize -> losses -> recovery x confidence -> lead score,
  timeline, investment, priority actions.

Pure and deterministic. Pass `trace(step, values)` to observe intermediate
values; nothing here logs or touches I/O.
"""
from leak_engines.sanitizer import sanitize
from leak_engines.benchmarks import compare_to_benchmarks
from leak_engines.losses import calculate_losses
from leak_engines.confidence import derive_confidence_factors, score_confidence, apply_confidence
from leak_engines.recovery import project_all_scenarios, build_recovery_timeline
from leak_engines.lead_score import score_lead
from leak_engines.timeline import generate_timeline, estimate_investment, calculate_roi
from leak_engines.priority import build_priority_actions, quick_wins, build_executive_summary
from leak_engines.validation import check_input_consistency


def compute_results(raw_inputs, trace=None, recovery_system=None):
    raw_inputs = raw_inputs if isinstance(raw_inputs, dict) else {}
    inputs = sanitize(raw_inputs)
    if trace:
        trace('inputs', dict(inputs))
    arr = inputs['currentARR']

    losses = calculate_losses(inputs, recovery_system=recovery_system, trace=trace)
    factors = derive_confidence_factors(arr)
    projections = project_all_scenarios(losses, factors)
    confidence = score_confidence(losses, arr)
    adjusted, bounds = apply_confidence(projections, confidence)
    if trace:
        trace('recovery', {name: p['totalRecovery'] for name, p in projections.items()})
        trace('confidence', dict(confidence, bounds=bounds))

    lead_score = score_lead({
        'currentARR': arr,
        'totalLoss': losses['totalLoss'],
        'monthlyLeads': inputs['monthlyLeads'],
        'averageDealValue': inputs['averageDealValue'],
        'industry': inputs['industry'],
        'hasProductUsage': raw_inputs.get('hasProductUsage'),
        'engagementScore': raw_inputs.get('engagementScore'),
    })

    conservative = adjusted['conservative']
    phases = generate_timeline(conservative, inputs)
    investment = estimate_investment(phases, inputs)
    roi = calculate_roi(conservative['totalRecovery'], investment['totalAnnualInvestment'], confidence['level'])
    if trace:
        trace('timeline', {'phases': [p['id'] for p in phases], 'investment': investment['implementationCost']})

    actions = build_priority_actions(losses, conservative, arr)
    wins = quick_wins(actions)

    return {
        'inputs': inputs,
        'lossBreakdown': losses,
        'confidenceFactors': factors,
        'recoveryProjection': adjusted,
        'confidence': dict(confidence, bounds=bounds),
        'leadScore': lead_score,
        'timeline': phases,
        'investment': investment,
        'roi': roi,
        'recoveryTimeline': build_recovery_timeline(conservative['totalRecovery']),
        'priorityActions': actions,
        'quickWins': wins,
        'executiveSummary': build_executive_summary(losses, conservative, arr, actions, wins),
        'benchmarkComparison': compare_to_benchmarks(inputs),
        'warnings': check_input_consistency(inputs, losses),
    }
