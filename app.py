"""
Verzugszinsrechner Web Application
Serves the calculator pages and a JSON API around the interest engine
"""

import logging
import traceback
from datetime import datetime
from io import BytesIO
from pathlib import Path

import pandas as pd
from flask import Flask, abort, jsonify, redirect, request, send_file, send_from_directory

from verzugszins_calculator import (
    VerzugszinsCalculator,
    format_chf,
    format_number,
    parse_swiss_number
)
from verzugszins_config import LANGUAGES, BuildPaths

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config['SITE_DIR'] = BuildPaths.from_env().site_dir

# Initialize calculator
calculator = VerzugszinsCalculator()

DATE_FORMAT = '%Y-%m-%d'


def _site_dir() -> Path:
    return Path(app.config['SITE_DIR'])


def parse_calculation_request(data):
    """
    Turn request JSON into calculator inputs

    Amounts may be sent as numbers or as Swiss formatted strings.

    Returns:
        (inputs, errors) where errors lists every field that could not be read
    """
    errors = []
    inputs = {}

    principal = data.get('principal')
    if principal is not None:
        principal = parse_swiss_number(principal)
        if principal is None or isinstance(principal, bool) or not isinstance(principal, (int, float)):
            errors.append("Principal is not a number")
            principal = None
    inputs['principal'] = principal

    rate = data.get('interest_rate')
    if rate is not None:
        rate = parse_swiss_number(rate)
        if rate is None or isinstance(rate, bool) or not isinstance(rate, (int, float)):
            errors.append("Interest rate is not a number")
            rate = None
    inputs['interest_rate'] = rate

    for field in ('start_date', 'end_date'):
        value = data.get(field)
        if value:
            try:
                value = datetime.strptime(value, DATE_FORMAT).date()
            except (TypeError, ValueError):
                errors.append(f"Invalid date for {field}, expected YYYY-MM-DD")
                value = None
        inputs[field] = value or None

    return inputs, errors


def _validated_inputs():
    data = request.get_json(silent=True) or {}
    inputs, errors = parse_calculation_request(data)
    if not errors:
        valid, errors = calculator.validate_inputs(inputs)
    return data, inputs, errors


@app.route('/')
def index():
    """Default to the German calculator"""
    return redirect('/de/')


@app.route('/<lang>/')
@app.route('/<lang>/<page>')
def calculator_page(lang, page='index.html'):
    """Calculator pages, one directory per language"""
    if lang not in LANGUAGES:
        abort(404)
    return send_from_directory(_site_dir() / lang, page)


@app.route('/css/<path:filename>')
def stylesheets(filename):
    return send_from_directory(_site_dir() / 'css', filename)


@app.route('/scripts/<path:filename>')
def scripts(filename):
    return send_from_directory(_site_dir() / 'scripts', filename)


@app.route('/api/calculate', methods=['POST'])
def calculate():
    """API endpoint for default interest (simple or compound)"""
    try:
        data, inputs, errors = _validated_inputs()
        if errors:
            return jsonify({'success': False, 'errors': errors}), 400

        method = data.get('method', 'simple')
        if method == 'compound':
            compute = calculator.calculate_compound_interest
        elif method == 'simple':
            compute = calculator.calculate_default_interest
        else:
            return jsonify({'success': False, 'errors': [f"Unknown method: {method}"]}), 400

        result = compute(
            principal=inputs['principal'],
            start_date=inputs['start_date'],
            end_date=inputs['end_date'],
            interest_rate=inputs['interest_rate']
        )
        if result.is_error:
            return jsonify({'success': False, 'error': result.error}), 400

        return jsonify({
            'success': True,
            'result': result.to_dict(),
            'formatted': {
                'principal': format_chf(result.principal),
                'interest': format_chf(result.interest),
                'total': format_chf(result.total),
                'interest_rate': f"{format_number(result.interest_rate)}%"
            }
        })

    except Exception as e:
        logger.exception("Calculation failed")
        return jsonify({
            'success': False,
            'error': str(e),
            'trace': traceback.format_exc()
        }), 500


@app.route('/api/schedule', methods=['POST'])
def accrual_schedule():
    """Month-by-month accrual of default interest"""
    try:
        data, inputs, errors = _validated_inputs()
        if errors:
            return jsonify({'success': False, 'errors': errors}), 400

        schedule_df = calculator.generate_accrual_schedule(
            principal=inputs['principal'],
            start_date=inputs['start_date'],
            end_date=inputs['end_date'],
            interest_rate=inputs['interest_rate']
        )

        schedule_data = []
        for _, row in schedule_df.iterrows():
            schedule_data.append({
                'period': int(row['period']),
                'period_start': row['period_start'].isoformat(),
                'period_end': row['period_end'].isoformat(),
                'days': int(row['days']),
                'interest': format_chf(row['interest']),
                'cumulative_interest': format_chf(row['cumulative_interest']),
                'balance': format_chf(row['balance'])
            })

        return jsonify({
            'success': True,
            'schedule': schedule_data,
            'summary': {
                'principal': format_chf(inputs['principal']),
                'total_days': int(schedule_df['days'].sum()),
                'total_interest': format_chf(float(schedule_df['interest'].sum()))
            }
        })

    except Exception as e:
        logger.exception("Schedule generation failed")
        return jsonify({
            'success': False,
            'error': str(e),
            'trace': traceback.format_exc()
        }), 500


@app.route('/api/download-schedule', methods=['POST'])
def download_schedule():
    """Download the accrual schedule as Excel"""
    try:
        data, inputs, errors = _validated_inputs()
        if errors:
            return jsonify({'success': False, 'errors': errors}), 400

        schedule_df = calculator.generate_accrual_schedule(
            principal=inputs['principal'],
            start_date=inputs['start_date'],
            end_date=inputs['end_date'],
            interest_rate=inputs['interest_rate']
        )
        result = calculator.calculate_default_interest(
            inputs['principal'], inputs['start_date'], inputs['end_date'], inputs['interest_rate']
        )

        output = BytesIO()
        with pd.ExcelWriter(output, engine='openpyxl') as writer:
            schedule_df.to_excel(writer, sheet_name='Zinsverlauf', index=False)

            summary_data = {
                'Description': ['Principal', 'Start Date', 'End Date', 'Days',
                                'Interest Rate', 'Method', 'Interest', 'Total'],
                'Value': [result.principal, result.start_date.isoformat(), result.end_date.isoformat(),
                          result.days, f"{result.interest_rate}%", result.method.value,
                          result.interest, result.total]
            }
            pd.DataFrame(summary_data).to_excel(writer, sheet_name='Summary', index=False)

        output.seek(0)

        return send_file(
            output,
            mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
            as_attachment=True,
            download_name=f'Verzugszins_{datetime.now().strftime("%Y%m%d_%H%M%S")}.xlsx'
        )

    except Exception as e:
        logger.exception("Schedule download failed")
        return jsonify({
            'success': False,
            'error': str(e),
            'trace': traceback.format_exc()
        }), 500


@app.route('/api/parse-number', methods=['POST'])
def parse_number():
    """Parse a Swiss formatted amount"""
    data = request.get_json(silent=True) or {}
    value = parse_swiss_number(data.get('value'))
    if value is None:
        return jsonify({'success': False, 'error': 'Not a number'}), 400
    return jsonify({'success': True, 'value': value})


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True, port=8080)
