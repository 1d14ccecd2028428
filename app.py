"""
Revenue Leak Calculator: Flask API Server
Thin JSON surface over the unified calculation pipeline. No formulas live
here; every number comes from leak_engines.pipeline.compute_results.
"""
import logging
import os
import traceback
from flask import Flask, jsonify, request
from leak_engines.benchmarks import (DEAL_SIZE_TIERS, INDUSTRY_BENCHMARKS, RECOVERY_SYSTEMS,
                                     RECOVERY_MATRIX, BEST_IN_CLASS_TARGETS, get_industry_defaults,
                                     thaw)
from leak_engines.confidence import validate_recovery_assumptions
from leak_engines.data_loader import DATA_DIR, load_parameters, recompute_submissions
from leak_engines.formatting import format_currency
from leak_engines.lead_score import score_lead
from leak_engines.pipeline import compute_results
from leak_engines.sanitizer import normalize_industry
from leak_engines.submission import inputs_from_steps, to_submission_record

app = Flask(__name__)
app.config.setdefault('DATA_DIR', DATA_DIR)

STATE = {'params': None, 'loaded': False}


def _configure_logging(level_name):
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    logging.getLogger().setLevel(level)


def _log_trace(step, values):
    logging.debug(f"[trace] {step}: {values}")


def _trace_hook():
    return _log_trace if STATE['params'].get('traceCalculations') else None


def _error(message, status):
    return jsonify({'status': 'error', 'message': message}), status


def _json_body():
    body = request.get_json(force=True, silent=True)
    return body if isinstance(body, dict) else None


@app.before_request
def _ensure_loaded():
    if not STATE['loaded']:
        STATE['params'] = load_parameters(app.config['DATA_DIR'])
        _configure_logging(STATE['params']['logLevel'])
        STATE['loaded'] = True
        logging.info(f"Revenue leak engines ready (data dir: {app.config['DATA_DIR']})")


@app.route('/api/health')
def api_health():
    return jsonify({'status': 'ok', 'currency': STATE['params']['currency']})


@app.route('/api/benchmarks')
def api_benchmarks():
    return jsonify({
        'status': 'ok',
        'industries': thaw(INDUSTRY_BENCHMARKS),
        'dealSizeTiers': thaw(DEAL_SIZE_TIERS),
        'recoverySystems': thaw(RECOVERY_SYSTEMS),
        'recoveryMatrix': thaw(RECOVERY_MATRIX),
        'bestInClass': thaw(BEST_IN_CLASS_TARGETS),
    })


@app.route('/api/industry-defaults/<industry>')
def api_industry_defaults(industry):
    key = normalize_industry(industry)
    return jsonify({'status': 'ok', 'industry': key, 'defaults': thaw(get_industry_defaults(key))})


@app.route('/api/calculate', methods=['POST'])
def api_calculate():
    """Compute the full result for raw inputs or step-wise form data.
    Body: raw input fields, or {"calculator_data": {"step_1": {...}, ...}}.
    """
    body = _json_body()
    if body is None:
        return _error('Request body must be a JSON object', 400)
    try:
        if 'calculator_data' in body:
            raw = inputs_from_steps(body['calculator_data'])
        else:
            raw = body.get('inputs', body)
            if not isinstance(raw, dict):
                return _error('inputs must be a JSON object', 400)
            raw = dict(raw)
        if not raw.get('industry'):
            raw['industry'] = STATE['params']['defaultIndustry']
        results = compute_results(raw, trace=_trace_hook(),
                                  recovery_system=STATE['params'].get('recoverySystem'))
        losses = results['lossBreakdown']
        recovery = results['recoveryProjection']
        return jsonify({
            'status': 'ok',
            'results': results,
            'submission': to_submission_record(results, contact=raw),
            'display': {
                'totalLoss': format_currency(losses['totalLoss']),
                'conservativeRecovery': format_currency(recovery['conservative']['totalRecovery']),
                'optimisticRecovery': format_currency(recovery['optimistic']['totalRecovery']),
                'implementationCost': format_currency(results['investment']['implementationCost']),
            },
        })
    except ValueError as e:
        return _error(str(e), 400)
    except Exception as e:
        traceback.print_exc()
        return _error(str(e), 500)


@app.route('/api/lead-score', methods=['POST'])
def api_lead_score():
    body = _json_body()
    if body is None:
        return _error('Request body must be a JSON object', 400)
    missing = [f for f in ('currentARR', 'totalLoss') if f not in body]
    if missing:
        return _error(f"Missing fields: {', '.join(missing)}", 400)
    return jsonify({'status': 'ok', 'leadScore': score_lead(body)})


@app.route('/api/recovery-assumptions', methods=['POST'])
def api_recovery_assumptions():
    body = _json_body()
    if body is None:
        return _error('Request body must be a JSON object', 400)
    return jsonify(dict(validate_recovery_assumptions(body), status='ok'))


@app.route('/api/admin/recompute', methods=['POST'])
def api_admin_recompute():
    """Batch re-run of the exported submissions workbook with current formulas."""
    try:
        summary = recompute_submissions(STATE['params'], data_dir=app.config['DATA_DIR'],
                                        trace=_trace_hook())
        return jsonify(dict(summary, status='ok'))
    except Exception as e:
        traceback.print_exc()
        return _error(str(e), 500)


if __name__ == '__main__':
    app.run(debug=False, host='0.0.0.0', port=int(os.environ.get('PORT', 5000)))
