"""
MIRA Portal - Function Endpoints (JSON API)

Single request/response endpoints mounted under /functions/v1.
"""

from datetime import datetime, timezone

from flask import Blueprint, request, jsonify, current_app
from flask_login import current_user

from mira_portal.errors import AccessDenied, PortalError, RepairError, ValidationError
from mira_portal.models import User
from mira_portal.services.ai_search import answer_platform_question
from mira_portal.services.guards import function_auth_required
from mira_portal.services.repair import repair_company_associations
from mira_portal.services.roles import ADMIN
from mira_portal.services.scraper import scrape_website
from mira_portal.services.search_strings import process_pdf
from mira_portal.services.session import build_auth_session, current_auth_session

functions_bp = Blueprint('functions', __name__)


def _payload():
    """JSON body of the request, {} when absent."""
    data = request.get_json(silent=True)
    if data is None and request.data:
        raise ValidationError('Invalid request format. Please provide a JSON body.')
    return data or {}


@functions_bp.route('/ai-search', methods=['POST'])
@function_auth_required()
def ai_search():
    """{query} -> {answer}"""
    answer = answer_platform_question(_payload().get('query'))
    return jsonify({'answer': answer})


@functions_bp.route('/website-scraper', methods=['POST'])
@function_auth_required()
def website_scraper():
    """{url} -> {success, text, domain, url} | {success: false, error}"""
    result = scrape_website(_payload().get('url'))
    return jsonify(result)


@functions_bp.route('/process-pdf', methods=['POST'])
@function_auth_required()
def process_pdf_file():
    """{pdf_path, search_string_id} -> {success, extracted_text, record}"""
    data = _payload()
    try:
        result = process_pdf(data.get('pdf_path'), data.get('search_string_id'), current_auth_session())
    except AccessDenied:
        raise
    except PortalError as e:
        current_app.logger.error('Error processing PDF: %s', e)
        return jsonify({'error': e.message}), 500
    return jsonify(result)


@functions_bp.route('/repair-company-associations', methods=['POST'])
@function_auth_required()
def repair_associations():
    """Repairs the calling user's company association."""
    current_app.logger.info('Processing repair for user %s (%s)', current_user.id, current_user.email)
    try:
        report = repair_company_associations(current_user)
    except RepairError as e:
        return jsonify({'status': 'error', 'error': e.message, 'details': e.details}), 500
    return jsonify(report)


@functions_bp.route('/get_all_users', methods=['GET', 'POST'])
@function_auth_required(ADMIN)
def get_all_users():
    """Every user with profile, company and role."""
    users = User.query.order_by(User.created_at).limit(1000).all()

    data = []
    for user in users:
        auth = build_auth_session(user)
        link = next((row for row in user.company_links if row.company_id == auth.company_id), None)
        data.append({
            'id': user.id,
            'email': user.email,
            'name': user.display_name,
            'first_name': user.first_name,
            'last_name': user.last_name,
            'role': auth.role,
            'company_id': auth.company_id,
            'company_name': link.company.name if link and link.company else None,
            'is_superadmin': user.is_superadmin,
            'created_at': user.created_at.isoformat() if user.created_at else None,
            'last_sign_in_at': user.last_login_at.isoformat() if user.last_login_at else None,
            'is_active': user.is_active,
        })

    return jsonify({'data': data, 'count': len(data)})


@functions_bp.route('/website-crawler-heartbeat', methods=['POST'])
@function_auth_required()
def website_crawler_heartbeat():
    """{jobId} -> {jobId, alive, timestamp}"""
    job_id = _payload().get('jobId')
    if not job_id:
        raise ValidationError('jobId is required')
    return jsonify({
        'jobId': job_id,
        'alive': True,
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })
