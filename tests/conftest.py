"""Shared fixtures for the leak engine tests."""
import pytest


@pytest.fixture
def scenario_inputs():
    """The reference $1M ARR SaaS company."""
    return {
        'currentARR': 1_000_000,
        'monthlyLeads': 100,
        'averageDealValue': 10_000,
        'leadResponseTimeHours': 1,
        'monthlyMRR': 50_000,
        'failedPaymentRate': 5,
        'monthlyFreeSignups': 500,
        'freeToPaidConversion': 2,
        'manualHoursPerWeek': 10,
        'hourlyRate': 75,
        'industry': 'saas-software',
    }


@pytest.fixture
def zero_inputs():
    return {
        'currentARR': 0, 'monthlyMRR': 0, 'monthlyLeads': 0, 'averageDealValue': 0,
        'leadResponseTimeHours': 0, 'monthlyFreeSignups': 0,
        'freeToPaidConversionRatePercent': 0, 'failedPaymentRatePercent': 0,
        'manualHoursPerWeek': 0, 'hourlyRate': 0,
    }


@pytest.fixture
def client(tmp_path):
    from app import app, STATE
    app.config['TESTING'] = True
    app.config['DATA_DIR'] = str(tmp_path)
    STATE['loaded'] = False
    STATE['params'] = None
    with app.test_client() as c:
        yield c
    STATE['loaded'] = False
