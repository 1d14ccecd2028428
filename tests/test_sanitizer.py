import math

import pytest

from leak_engines.sanitizer import sanitize, to_number, to_bool, normalize_industry, FIELD_RULES


def test_empty_input_gets_defaults():
    assert sanitize({}) == {
        'currentARR': 0.0, 'monthlyMRR': 0.0, 'monthlyLeads': 0.0,
        'averageDealValue': 5000.0, 'leadResponseTimeHours': 24.0,
        'monthlyFreeSignups': 0.0, 'freeToPaidConversionRatePercent': 2.0,
        'failedPaymentRatePercent': 5.0, 'manualHoursPerWeek': 10.0,
        'hourlyRate': 75.0, 'industry': 'other',
    }


def test_non_dict_input_gets_defaults():
    assert sanitize(None) == sanitize({})
    assert sanitize([1, 2]) == sanitize({})


@pytest.mark.parametrize('field,raw,expected', [
    ('hourlyRate', 1000, 500),
    ('hourlyRate', 5, 25),
    ('freeToPaidConversionRatePercent', 40, 25),
    ('failedPaymentRatePercent', -3, 0),
    ('failedPaymentRatePercent', 45, 30),
    ('manualHoursPerWeek', 100, 80),
    ('leadResponseTimeHours', 500, 168),
    ('leadResponseTimeHours', 0.01, 0.1),
    ('averageDealValue', 50, 100),
    ('currentARR', -10, 0),
])
def test_out_of_range_values_are_clamped(field, raw, expected):
    assert sanitize({field: raw})[field] == expected


def test_zero_or_negative_response_time_means_instant():
    assert sanitize({'leadResponseTimeHours': 0})['leadResponseTimeHours'] == 0
    assert sanitize({'leadResponseTimeHours': -4})['leadResponseTimeHours'] == 0


@pytest.mark.parametrize('garbage', [None, float('nan'), float('inf'), -math.inf, 'abc', '', True, [], {}])
def test_garbage_falls_back_to_default(garbage):
    assert sanitize({'hourlyRate': garbage})['hourlyRate'] == 75


def test_display_strings_are_parsed():
    out = sanitize({'currentARR': '$1,200,000', 'failedPaymentRate': '4.5%'})
    assert out['currentARR'] == 1_200_000
    assert out['failedPaymentRatePercent'] == 4.5


def test_aliases_map_to_canonical_fields():
    out = sanitize({'freeToPaidConversionRate': 3, 'manualHours': 20, 'monthly_mrr': 9000})
    assert out['freeToPaidConversionRatePercent'] == 3
    assert out['manualHoursPerWeek'] == 20
    assert out['monthlyMRR'] == 9000


def test_canonical_name_wins_over_alias():
    out = sanitize({'failedPaymentRatePercent': 7, 'failedPaymentRate': 2})
    assert out['failedPaymentRatePercent'] == 7
    out = sanitize({'failedPaymentRate': 2, 'failedPaymentRatePercent': 7})
    assert out['failedPaymentRatePercent'] == 7


def test_industry_normalisation():
    assert normalize_industry('SaaS Software') == 'saas-software'
    assert normalize_industry(' financial_services ') == 'financial-services'
    assert normalize_industry('space-mining') == 'other'
    assert normalize_industry(42) == 'other'


def test_to_number():
    assert to_number('12') == 12.0
    assert to_number(False) is None
    assert to_number(float('nan')) is None
    assert to_number(object()) is None


@pytest.mark.parametrize('raw', [
    {},
    {'currentARR': -5, 'hourlyRate': float('nan'), 'leadResponseTimeHours': None},
    {'leadResponseTimeHours': 0, 'industry': 'Healthcare'},
    {'averageDealValue': 10, 'freeToPaidConversionRate': 99, 'manualHours': -1},
    {'currentARR': '$2,000', 'industry': None, 'monthlyLeads': 'lots'},
])
def test_sanitize_is_idempotent(raw):
    once = sanitize(raw)
    assert sanitize(once) == once


def test_oversized_integers_fall_back_to_default():
    assert to_number(10 ** 400) is None
    assert to_number('1' * 400) is None
    out = sanitize({'currentARR': 10 ** 400, 'hourlyRate': -(10 ** 400)})
    assert out['currentARR'] == 0
    assert out['hourlyRate'] == 75


@pytest.mark.parametrize('value,expected', [
    (True, True), (False, False), ('yes', True), (' TRUE ', True), ('1', True),
    ('false', False), ('no', False), ('', False), (None, False), (0, False), (1, True), (2.5, True),
])
def test_to_bool(value, expected):
    assert to_bool(value) is expected


def test_field_rules_are_read_only():
    with pytest.raises(TypeError):
        FIELD_RULES['hourlyRate'] = (0, 0, None)
