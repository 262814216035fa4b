"""AI assistant API endpoints."""
import random

from flask import Blueprint, request, jsonify, current_app
from backend.ai_client import AIClient, CompletionError, FALLBACK_REPLIES
from backend.docs_loader import get_docs_loader

ai_bp = Blueprint('ai', __name__)


def get_ai_client():
    """Get the AI client for the current app."""
    client = current_app.extensions.get('ai_client')
    if client is None:
        loader = get_docs_loader(current_app.config.get('DOCS_DIR'))
        client = AIClient.from_config(current_app.config, docs_loader=loader)
        current_app.extensions['ai_client'] = client
    return client


@ai_bp.route('', methods=['POST'])
@ai_bp.route('/', methods=['POST'])
def chat():
    """Answer a chat conversation about Growsoft Lua scripting."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not data.get('messages'):
        return jsonify({'success': False, 'error': 'Missing messages'}), 400

    try:
        reply = get_ai_client().generate_reply(data['messages'], data.get('context'))
    except ValueError as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except CompletionError as e:
        current_app.logger.error(f"AI API error: {e}")
        return jsonify({
            'success': True,
            'reply': random.choice(FALLBACK_REPLIES),
            'fallback': True
        })

    return jsonify({'success': True, 'reply': reply})


@ai_bp.route('/generate', methods=['POST'])
def generate():
    """Generate Lua content from a single prompt."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or not isinstance(data.get('prompt'), str) or not data['prompt'].strip():
        return jsonify({'success': False, 'error': 'Missing prompt'}), 400

    result = get_ai_client().generate_content(data['prompt'], data.get('context'))
    status = 200 if result['success'] else 503
    return jsonify(result), status
