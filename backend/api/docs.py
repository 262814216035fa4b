"""Reference documentation API endpoints."""
from flask import Blueprint, request, jsonify, current_app
from backend.docs_loader import get_docs_loader

docs_bp = Blueprint('docs', __name__)


@docs_bp.route('', methods=['GET'])
@docs_bp.route('/', methods=['GET'])
def get_docs():
    """List documents, or return one document when a path or id is given."""
    loader = get_docs_loader(current_app.config.get('DOCS_DIR'))
    path = request.args.get('path') or request.args.get('id')

    if path:
        doc = loader.get_doc(path)
        if doc is None:
            return jsonify({'success': False, 'error': 'Document not found'}), 404
        return jsonify({'success': True, **doc})

    category = request.args.get('category')
    return jsonify({
        'success': True,
        'docs': loader.list_docs(category)
    })
