"""
Revenue Leak Calculator: Implementation Timeline & Investment Engine
Turns per-category recovery into phased initiatives, then costs them with
activity-based work-type rates and derives payback and ROI.
"""
from leak_engines.benchmarks import (WORK_TYPES, INDUSTRY_COMPLEXITY, REGULATED_INDUSTRIES,
                                     RECOVERY_MATRIX, frozen)
from leak_engines.confidence import derive_confidence_factors

DAYS_PER_WEEK = 5
MAX_IMPLEMENTATION_SHARE = 0.40
MAX_PAYBACK_MONTHS = 24
AMORTIZATION_YEARS = 3

TOOLING_BUDGET = frozen({'startup': 5000, 'scaleup': 15000, 'enterprise': 40000})
INFRASTRUCTURE_RATE = 0.10
COMPLIANCE_RATE = 0.15
MAINTENANCE_RATE = frozen({'low': 0.10, 'medium': 0.15, 'high': 0.20})
ROI_CONFIDENCE = frozen({'high': 1.0, 'medium': 0.8, 'low': 0.6})
ROI_CAP = 300
ROI_FLOOR = -100

# Fixed month windows; ordering by startMonth is structural
PHASES = frozen([
    {
        'id': 'lead-response', 'category': 'leadResponse',
        'title': 'Lead Response Optimization',
        'description': 'Implement automated lead response and notification systems with 2-month ramp-up',
        'startMonth': 1, 'endMonth': 3, 'difficulty': 'low', 'workType': 'quick-optimization',
        'threshold': (0.005, 25000),
        'actions': [
            {'title': 'Audit current response processes', 'weeks': 2, 'owner': 'Sales Ops'},
            {'title': 'Implement lead automation tools', 'weeks': 3, 'owner': 'Marketing'},
            {'title': 'Configure notification systems', 'weeks': 2, 'owner': 'Sales Ops'},
            {'title': 'Train response team', 'weeks': 2, 'owner': 'Sales Management'},
            {'title': 'Implement lead scoring system', 'weeks': 3, 'owner': 'Marketing Ops'},
            {'title': 'Monitor and optimize performance', 'weeks': 2, 'owner': 'Revenue Ops'},
        ],
    },
    {
        'id': 'payment-recovery', 'category': 'failedPayment',
        'title': 'Payment Recovery System',
        'description': 'Implement advanced payment retry logic and failure prevention',
        'startMonth': 2, 'endMonth': 5, 'difficulty': 'low', 'workType': 'tool-implementation',
        'threshold': (0.003, 15000),
        'actions': [
            {'title': 'Analyze payment failure patterns', 'weeks': 2, 'owner': 'Finance'},
            {'title': 'Design retry logic system', 'weeks': 3, 'owner': 'Engineering'},
            {'title': 'Implement payment retry automation', 'weeks': 4, 'owner': 'Engineering'},
            {'title': 'Add alternative payment methods', 'weeks': 3, 'owner': 'Product'},
            {'title': 'Deploy dunning management', 'weeks': 2, 'owner': 'Finance'},
            {'title': 'Monitor recovery performance', 'weeks': 2, 'owner': 'Finance'},
        ],
    },
    {
        'id': 'self-serve', 'category': 'selfServeGap',
        'title': 'Self-Serve Conversion Optimization',
        'description': 'Improve onboarding flow and conversion funnel with extensive testing',
        'startMonth': 4, 'endMonth': 6, 'difficulty': 'high', 'workType': 'technical-development',
        'threshold': (0.005, 25000),
        'actions': [
            {'title': 'Deep-dive conversion funnel analysis', 'weeks': 4, 'owner': 'Product Analytics'},
            {'title': 'User research and feedback collection', 'weeks': 3, 'owner': 'UX Research'},
            {'title': 'Redesign onboarding experience', 'weeks': 6, 'owner': 'Product'},
            {'title': 'Implement in-app guidance system', 'weeks': 5, 'owner': 'Engineering'},
            {'title': 'A/B test onboarding improvements', 'weeks': 8, 'owner': 'Growth'},
            {'title': 'Optimize conversion touchpoints', 'weeks': 4, 'owner': 'Product'},
        ],
    },
    {
        'id': 'process-automation', 'category': 'processInefficiency',
        'title': 'Process Automation Initiative',
        'description': 'Comprehensive automation of manual processes and workflow optimization',
        'startMonth': 6, 'endMonth': 10, 'difficulty': 'medium', 'workType': 'complex-automation',
        'threshold': (0.004, 20000),
        'actions': [
            {'title': 'Comprehensive process audit', 'weeks': 4, 'owner': 'Operations'},
            {'title': 'Process mapping and documentation', 'weeks': 3, 'owner': 'Operations'},
            {'title': 'Automation tool evaluation', 'weeks': 3, 'owner': 'IT'},
            {'title': 'Workflow automation design', 'weeks': 6, 'owner': 'Operations'},
            {'title': 'Automation platform implementation', 'weeks': 8, 'owner': 'Engineering'},
            {'title': 'Team training and change management', 'weeks': 4, 'owner': 'HR'},
            {'title': 'Rollout and optimization', 'weeks': 4, 'owner': 'Operations'},
        ],
    },
])


def phase_threshold(phase, arr):
    ratio, floor = phase['threshold']
    return max(arr * ratio, floor)


def generate_timeline(recovery, inputs):
    """Phases whose recovery clears max(ARR x ratio, floor), ordered by start month."""
    arr = inputs['currentARR']
    by_category = (recovery or {}).get('categoryRecovery', {})
    phases = []
    for template in PHASES:
        potential = by_category.get(template['category'], 0)
        if potential <= phase_threshold(template, arr):
            continue
        phase = {k: v for k, v in template.items() if k != 'threshold'}
        phase['dependencies'] = list(RECOVERY_MATRIX[template['category']]['dependencies'])
        phase['actions'] = [dict(a) for a in template['actions']]
        phase['recoveryPotential'] = potential
        phases.append(phase)
    phases.sort(key=lambda p: p['startMonth'])
    return phases


def phase_labor_cost(phase, industry):
    wt = WORK_TYPES[phase['workType']]
    weeks = sum(a['weeks'] for a in phase['actions'])
    return (wt['dailyRate'] * wt['teamSize'] * wt['fteFactor'] * DAYS_PER_WEEK * weeks
            * INDUSTRY_COMPLEXITY.get(industry, 1.0))


def estimate_investment(phases, inputs):
    if not phases:
        return {'implementationCost': 0.0, 'ongoingCost': 0.0, 'totalAnnualInvestment': 0.0,
                'paybackMonths': 0, 'breakdown': {}, 'capScale': 1.0}
    industry = inputs.get('industry', 'other')
    size = derive_confidence_factors(inputs['currentARR'])['companySize']
    labor_by_phase = {p['id']: phase_labor_cost(p, industry) for p in phases}
    labor = sum(labor_by_phase.values())
    tooling = TOOLING_BUDGET[size]
    technical = any(p['workType'] in ('technical-development', 'complex-automation') for p in phases)
    infrastructure = labor * INFRASTRUCTURE_RATE if technical else 0.0
    compliance = labor * COMPLIANCE_RATE if industry in REGULATED_INDUSTRIES else 0.0
    implementation = labor + tooling + infrastructure + compliance
    ongoing = sum(labor_by_phase[p['id']] * MAINTENANCE_RATE[p['difficulty']] for p in phases) + tooling

    total_recovery = sum(p['recoveryPotential'] for p in phases)
    cap = total_recovery * MAX_IMPLEMENTATION_SHARE
    scale = 1.0
    if implementation > cap:
        scale = cap / implementation if implementation > 0 else 0.0
        implementation *= scale
        ongoing *= scale

    payback = 0
    if total_recovery > 0:
        payback = min(round(implementation / (total_recovery / 12)), MAX_PAYBACK_MONTHS)
    return {
        'implementationCost': implementation,
        'ongoingCost': ongoing,
        'totalAnnualInvestment': implementation / AMORTIZATION_YEARS + ongoing,
        'paybackMonths': payback,
        'breakdown': {
            'labor': labor, 'tooling': tooling,
            'infrastructure': infrastructure, 'compliance': compliance,
            'byPhase': labor_by_phase,
        },
        'capScale': scale,
    }


def calculate_roi(annual_recovery, annual_investment, level):
    if annual_investment <= 0:
        return {'roi': 0.0, 'confidenceAdjustedROI': 0.0, 'category': 'Invalid'}
    roi = (annual_recovery - annual_investment) / annual_investment * 100
    adjusted = min(roi * ROI_CONFIDENCE.get(level, 0.8), ROI_CAP)
    category = ('Low Return' if adjusted < 25 else 'Moderate Return' if adjusted < 75
                else 'Strong Return' if adjusted < 150 else 'Exceptional Return')
    return {
        'roi': max(roi, ROI_FLOOR),
        'confidenceAdjustedROI': max(adjusted, ROI_FLOOR),
        'category': category,
    }
