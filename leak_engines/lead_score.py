"""
Revenue Leak Calculator: Lead Scoring Engine
0-100 qualification score from company scale, loss size, funnel volume,
deal size, industry and engagement signals.
"""
from leak_engines.benchmarks import get_industry
from leak_engines.sanitizer import normalize_industry, to_number, to_bool

# (threshold, points); first threshold exceeded wins
ARR_POINTS = ((10_000_000, 40), (1_000_000, 30), (100_000, 20))
ARR_FLOOR_POINTS = 10
LOSS_POINTS = ((5_000_000, 30), (1_000_000, 25), (500_000, 20), (100_000, 15), (50_000, 10))
LEAD_POINTS = ((1000, 15), (500, 12), (100, 8), (50, 5))
DEAL_POINTS = ((100_000, 10), (50_000, 8), (10_000, 6), (1000, 3))
MAX_INDUSTRY_POINTS = 5
PRODUCT_USAGE_POINTS = 15


def _tier_points(value, table, floor=0):
    for threshold, points in table:
        if value > threshold:
            return points
    return floor


def _num(value):
    return to_number(value) or 0.0


def score_lead(data):
    score = _tier_points(_num(data.get('currentARR')), ARR_POINTS, ARR_FLOOR_POINTS)
    score += _tier_points(_num(data.get('totalLoss')), LOSS_POINTS)
    score += _tier_points(_num(data.get('monthlyLeads')), LEAD_POINTS)
    score += _tier_points(_num(data.get('averageDealValue')), DEAL_POINTS)
    multiplier = get_industry(normalize_industry(data.get('industry')))['multiplier']
    score += round(MAX_INDUSTRY_POINTS * multiplier / 1.5)
    if to_bool(data.get('hasProductUsage')):
        score += PRODUCT_USAGE_POINTS
    engagement = _num(data.get('engagementScore'))
    score += 10 if engagement > 70 else 5 if engagement > 40 else 0
    return int(max(0, min(100, score)))
