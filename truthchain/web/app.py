"""
Web interface for TruthChain content verification
Provides a submission form plus a small JSON API
"""

import asyncio
import logging

from flask import Flask, render_template_string, request, jsonify

from ..models import ContentType
from ..utils.helpers import (
    calculate_stats,
    format_address,
    format_content_hash,
    format_date,
    get_confidence_color,
)
from ..verification.pipeline import ContentVerificationPipeline

logger = logging.getLogger(__name__)

HOME_TEMPLATE = '''
<!DOCTYPE html>
<html>
<head>
    <title>TruthChain</title>
</head>
<body>
    <h1>TruthChain content verification</h1>
    <form method="post" action="{{ url_for('verify_form') }}">
        <select name="content_type">
            {% for t in content_types %}<option value="{{ t }}">{{ t }}</option>{% endfor %}
        </select>
        <textarea name="content" rows="6" cols="80" placeholder="Text, URL or image data URI"></textarea>
        <label><input type="checkbox" name="record_on_chain"> Record on blockchain</label>
        <button type="submit">Verify</button>
    </form>
    {% if error %}<p class="error">{{ error }}</p>{% endif %}
    {% if outcome %}
    <div class="result {{ color }}">
        <h2>{{ "Verified" if outcome.result.is_verified else "Not verified" }} ({{ outcome.result.confidence_score }}%)</h2>
        <p>Model: {{ outcome.result.ai_model_used }}</p>
        <p>{{ outcome.result.explanation }}</p>
        <p>Content hash: {{ short_hash }} &middot; Blockchain: {{ outcome.metadata.blockchain_status.value }}</p>
    </div>
    {% endif %}
    <h2>Recent verifications</h2>
    <ul>
    {% for item in history %}
        <li>{{ format_date(item.timestamp) }} [{{ item.content_type.value }}] {{ item.content }}:
            {{ "verified" if item.is_verified else "not verified" }} ({{ item.confidence_score }}%)</li>
    {% endfor %}
    </ul>
</body>
</html>
'''


def _run(pipeline: ContentVerificationPipeline, coro):
    """Run a pipeline coroutine on a fresh event loop, closing sessions afterwards"""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.run_until_complete(pipeline.close())
        loop.close()


def create_app(pipeline: ContentVerificationPipeline) -> Flask:
    """Build the Flask app around an already constructed pipeline"""
    app = Flask(__name__)

    def _history():
        if pipeline.history is None:
            return []
        return pipeline.history.get_history()

    def _render_home(outcome=None, error=None, status=200):
        context = {
            'content_types': [t.value for t in ContentType],
            'history': _history(),
            'format_date': format_date,
            'outcome': outcome,
            'error': error,
        }
        if outcome is not None:
            context['color'] = get_confidence_color(
                outcome.result.confidence_score, outcome.result.is_verified
            )
            context['short_hash'] = format_content_hash(outcome.metadata.content_hash)
        return render_template_string(HOME_TEMPLATE, **context), status

    @app.route('/health')
    def health():
        """Service status endpoint"""
        return jsonify({'status': 'working', **pipeline.get_service_status()})

    @app.route('/')
    def home():
        """Home page with the submission form"""
        return _render_home()

    @app.route('/verify', methods=['POST'])
    def verify_form():
        """Verify content submitted from the form"""
        content = request.form.get('content', '').strip()
        content_type = request.form.get('content_type', ContentType.TEXT.value)
        record = bool(request.form.get('record_on_chain'))

        try:
            outcome = _run(pipeline, pipeline.submit(content, content_type, record_on_chain=record))
        except ValueError as e:
            return _render_home(error=str(e), status=400)
        return _render_home(outcome=outcome)

    @app.route('/api/verify', methods=['POST'])
    def api_verify():
        """Verify content and return the outcome as JSON"""
        data = request.get_json(silent=True) or {}
        content = data.get('content')
        content_type = data.get('content_type', ContentType.TEXT.value)
        if not isinstance(content, str):
            return jsonify({'error': "Missing required field: 'content'"}), 400

        try:
            outcome = _run(
                pipeline,
                pipeline.submit(content, content_type, record_on_chain=bool(data.get('record_on_chain')))
            )
        except ValueError as e:
            return jsonify({'error': str(e)}), 400

        return jsonify(outcome.model_dump(mode='json'))

    @app.route('/api/lookup', methods=['POST'])
    def api_lookup():
        """Return the on-chain record for submitted content"""
        data = request.get_json(silent=True) or {}
        content = data.get('content')
        if not isinstance(content, str) or not content:
            return jsonify({'error': "Missing required field: 'content'"}), 400

        record = pipeline.lookup(content)
        if record is None:
            return jsonify({'error': 'No on-chain record found'}), 404

        payload = record.model_dump()
        payload['verifier_short'] = format_address(record.verifier)
        return jsonify(payload)

    @app.route('/api/history', methods=['GET'])
    def api_history():
        return jsonify([item.model_dump(mode='json') for item in _history()])

    @app.route('/api/history', methods=['DELETE'])
    def api_clear_history():
        if pipeline.history is not None:
            pipeline.history.clear_history()
        return jsonify({'status': 'cleared'})

    @app.route('/api/stats')
    def api_stats():
        return jsonify(calculate_stats(_history()).model_dump())

    return app
