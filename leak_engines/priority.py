"""
Revenue Leak Calculator: Priority Action Engine
Ranks the recovery actions worth pursuing, picks quick wins and builds the
executive summary shown at the top of the results page.
"""
from leak_engines.benchmarks import LOSS_KEYS, RECOVERY_MATRIX, frozen

ACTIONS = frozen({
    'leadResponse': {
        'id': 'lead-response', 'title': 'Accelerate Lead Response Time',
        'description': 'Implement automated lead routing and instant response systems',
        'effort': 'Medium', 'complexity': 'Medium', 'timeframe': '4-6 weeks', 'paybackPeriod': '2-3 months',
        'whyItMatters': 'Faster lead response dramatically increases conversion rates. '
                        'Every hour of delay reduces conversion probability.',
        'implementationSteps': ['Set up automated lead routing', 'Create instant response templates',
                                'Train sales team on new process', 'Monitor response time metrics'],
        'minLoss': 1000,
    },
    'selfServeGap': {
        'id': 'selfserve-optimization', 'title': 'Optimize Self-Serve Experience',
        'description': 'Improve onboarding flow and reduce friction points',
        'effort': 'High', 'complexity': 'High', 'timeframe': '8-12 weeks', 'paybackPeriod': '4-6 months',
        'whyItMatters': 'Self-serve optimization reduces acquisition costs and lifts conversion.',
        'implementationSteps': ['Conduct user journey analysis', 'Identify friction points in onboarding',
                                'Design improved user flows', 'A/B test new experience', 'Roll out optimized flow'],
        'minLoss': 500,
    },
    'processInefficiency': {
        'id': 'process-automation', 'title': 'Automate Manual Processes',
        'description': 'Eliminate repetitive tasks and streamline workflows',
        'effort': 'Low', 'complexity': 'Low', 'timeframe': '2-4 weeks', 'paybackPeriod': '1-2 months',
        'whyItMatters': 'Automation cuts operational cost and frees team capacity for strategic work.',
        'implementationSteps': ['Map current manual processes', 'Identify automation opportunities',
                                'Implement workflow automation', 'Train team on new processes',
                                'Monitor efficiency gains'],
        'minLoss': 1000,
    },
    'failedPayment': {
        'id': 'payment-recovery', 'title': 'Improve Payment Recovery',
        'description': 'Implement dunning management and payment retry logic',
        'effort': 'Low', 'complexity': 'Low', 'timeframe': '1-2 weeks', 'paybackPeriod': '1 month',
        'whyItMatters': 'Failed payment recovery directly reduces involuntary churn.',
        'implementationSteps': ['Set up automated dunning sequences', 'Implement smart retry logic',
                                'Create customer communication templates', 'Monitor recovery rates',
                                'Optimize based on performance'],
        'minLoss': 500,
    },
})
MAX_ACTIONS = 4
MAX_QUICK_WINS = 2


def loss_percent(loss, arr):
    return loss / arr * 100 if arr > 0 else 0


def urgency_level(loss, arr):
    pct = loss_percent(loss, arr)
    return 'Critical' if pct > 8 else 'High' if pct > 5 else 'Medium' if pct > 2 else 'Low'


def action_confidence(loss, arr):
    pct = loss_percent(loss, arr)
    if arr > 10_000_000 and pct > 5:
        return 'High'
    if arr > 5_000_000 and pct > 3:
        return 'High'
    if arr > 1_000_000 and pct > 2:
        return 'Medium'
    return 'Medium' if pct > 1 else 'Low'


def build_priority_actions(losses, recovery, arr):
    by_category = recovery.get('categoryRecovery', {})
    actions = []
    for cat, tmpl in ACTIONS.items():
        loss = losses.get(LOSS_KEYS[cat], 0)
        if loss <= max(arr * 0.0001, tmpl['minLoss']):
            continue
        action = {k: v for k, v in tmpl.items() if k != 'minLoss'}
        action['implementationSteps'] = list(tmpl['implementationSteps'])
        action['dependencies'] = list(RECOVERY_MATRIX[cat]['dependencies'])
        action['category'] = cat
        action['lossAmount'] = loss
        action['recoveryAmount'] = by_category.get(cat, 0)
        action['urgency'] = urgency_level(loss, arr)
        action['confidence'] = action_confidence(loss, arr)
        actions.append(action)
    shown = sum(a['recoveryAmount'] for a in actions)
    for a in actions:
        a['impact'] = round(a['recoveryAmount'] / shown * 100) if shown > 0 else 0
    actions.sort(key=lambda a: a['recoveryAmount'], reverse=True)
    return actions[:MAX_ACTIONS]


def quick_wins(actions):
    return [{
        'action': a['title'], 'impact': a['impact'], 'timeframe': a['timeframe'],
        'recoveryAmount': a['recoveryAmount'], 'confidence': a['confidence'],
        'complexity': a['complexity'], 'whyItMatters': a['whyItMatters'],
    } for a in actions if a['effort'] == 'Low'][:MAX_QUICK_WINS]


def build_executive_summary(losses, recovery, arr, actions, wins):
    total = losses.get('totalLoss', 0)
    realistic = recovery.get('totalRecovery', 0)
    pct = loss_percent(total, arr)
    urgency = 'Critical' if pct > 25 else 'High' if pct > 15 else 'Medium' if pct > 8 else 'Low'
    confidence = 'High' if pct > 15 else 'Medium' if pct > 8 else 'Low'
    if wins:
        time_to_value = wins[0]['timeframe']
    elif actions:
        time_to_value = actions[0]['timeframe']
    else:
        time_to_value = '8-12 weeks'
    if arr > 0 and realistic > arr * 0.1:
        impact = 'High-impact opportunity with significant revenue recovery potential'
    elif arr > 0 and realistic > arr * 0.05:
        impact = 'Moderate-impact opportunity with meaningful revenue improvements'
    else:
        impact = 'Low-impact opportunity with incremental revenue gains'
    return {
        'totalLeakage': total, 'realisticRecovery': realistic,
        'leakPercentage': pct, 'urgencyLevel': urgency, 'confidenceLevel': confidence,
        'timeToValue': time_to_value, 'businessImpact': impact,
        'priorityActionCount': len(actions), 'quickWinCount': len(wins),
    }
