"""
Revenue Leak Calculator: Data Loader
Reads the settings workbook and exported submission workbooks, and writes
batch-recomputed results back out. All file I/O lives here; the engines stay pure.
"""
import os
import logging
import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side

from leak_engines.benchmarks import RECOVERY_SYSTEMS
from leak_engines.pipeline import compute_results
from leak_engines.sanitizer import to_bool
from leak_engines.submission import inputs_from_record, to_submission_record

DATA_DIR = os.environ.get(
    'LEAK_CALCULATOR_DATA_DIR',
    os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'data'))

RESULT_COLUMNS = (
    'row', 'company_name', 'contact_email', 'industry', 'current_arr', 'monthly_mrr',
    'lead_response_loss', 'failed_payment_loss', 'selfserve_gap_loss',
    'process_inefficiency_loss', 'total_leak', 'recovery_potential_70',
    'recovery_potential_85', 'leak_percentage', 'lead_score', 'confidence_level',
)


def read_xlsx_sheet(filepath, sheet_name=None):
    wb = openpyxl.load_workbook(filepath, read_only=True, data_only=True)
    ws = wb[sheet_name] if sheet_name else wb.active
    rows = list(ws.iter_rows(values_only=True))
    wb.close()
    if len(rows) < 2:
        return []
    headers = [str(h).strip() if h else f'col_{i}' for i, h in enumerate(rows[0])]
    return [dict(zip(headers, row)) for row in rows[1:]
            if any(v is not None and v != '' for v in row)]


def load_parameters(data_dir=None):
    """Overlay config/parameters.xlsx (Parameter | Value rows) on the defaults."""
    path = os.path.join(data_dir or DATA_DIR, 'config', 'parameters.xlsx')
    p = _default_params()
    if not os.path.exists(path):
        return p
    rows = read_xlsx_sheet(path)
    param_map = {
        'Log Level': 'logLevel', 'Default Industry': 'defaultIndustry',
        'Currency': 'currency', 'Trace Calculations': 'traceCalculations',
        'Submissions File': 'submissionsFile', 'Results File': 'resultsFile',
        'Recovery System Override': 'recoverySystem',
    }
    for row in rows:
        key = str(row.get('Parameter', '')).strip()
        val = row.get('Value')
        if key in param_map and val is not None and val != '':
            mapped = param_map[key]
            if mapped == 'traceCalculations':
                val = to_bool(val)
            elif mapped == 'logLevel':
                val = str(val).strip().upper()
            elif mapped == 'recoverySystem':
                val = str(val).strip().lower()
                if val not in RECOVERY_SYSTEMS:
                    logging.warning(f"Ignoring unknown recovery system override: {val}")
                    continue
            else:
                val = str(val).strip()
            p[mapped] = val
    logging.info(f"Loaded {len(rows)} parameter rows from {path}")
    return p


def _default_params():
    return {
        'logLevel': 'INFO', 'defaultIndustry': 'other', 'currency': 'USD',
        'traceCalculations': False, 'recoverySystem': None,
        'submissionsFile': os.path.join('raw', 'submissions.xlsx'),
        'resultsFile': os.path.join('output', 'recomputed_results.xlsx'),
    }


def load_submissions(path):
    if not os.path.exists(path):
        logging.warning(f"Submissions file not found: {path}")
        return []
    rows = read_xlsx_sheet(path)
    logging.info(f"Loaded {len(rows)} submissions from {path}")
    return rows


def write_results_workbook(records, path):
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = 'Recomputed Results'
    hf = Font(bold=True, color='FFFFFF', size=11)
    hfill = PatternFill(start_color='2E2E38', end_color='2E2E38', fill_type='solid')
    tb = Border(left=Side(style='thin'), right=Side(style='thin'),
                top=Side(style='thin'), bottom=Side(style='thin'))
    for c, h in enumerate(RESULT_COLUMNS, 1):
        cell = ws.cell(row=1, column=c, value=h)
        cell.font = hf; cell.fill = hfill; cell.alignment = Alignment(horizontal='center'); cell.border = tb
    for r, rec in enumerate(records, 2):
        for c, col in enumerate(RESULT_COLUMNS, 1):
            ws.cell(row=r, column=c, value=rec.get(col)).border = tb
    for col in ws.columns:
        ml = max(len(str(cell.value or '')) for cell in col)
        ws.column_dimensions[col[0].column_letter].width = min(ml + 2, 40)
    wb.save(path)
    return path


def recompute_submissions(params=None, data_dir=None, trace=None):
    """Re-run every stored submission through the current formulas.

    A row that fails is logged and reported; the batch carries on.
    """
    base = data_dir or DATA_DIR
    params = params or load_parameters(base)
    source = os.path.join(base, params['submissionsFile'])
    target = os.path.join(base, params['resultsFile'])
    records, failed = [], []
    for i, row in enumerate(load_submissions(source), start=2):
        try:
            raw = inputs_from_record(row)
            if not raw.get('industry'):
                raw['industry'] = params['defaultIndustry']
            result = compute_results(raw, trace=trace, recovery_system=params.get('recoverySystem'))
            rec = to_submission_record(result)
            rec['row'] = i
            rec['company_name'] = row.get('company_name')
            rec['contact_email'] = row.get('contact_email')
            records.append(rec)
        except Exception as e:
            logging.warning(f"Submission row {i} failed to recompute: {type(e).__name__}: {e}")
            failed.append({'row': i, 'error': str(e)})
    if records:
        write_results_workbook(records, target)
    logging.info(f"Recomputed {len(records)} submissions ({len(failed)} failed) -> {target}")
    return {
        'processed': len(records), 'failed': failed,
        'outputPath': target if records else None,
        'totalLeak': round(sum(r['total_leak'] for r in records), 2),
    }
