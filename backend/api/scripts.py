"""Script management API endpoints."""
from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError
from backend.models import db, Script, SCRIPT_STATUSES
from backend.scripting import check_script

scripts_bp = Blueprint('scripts', __name__)

RECENT_SCRIPTS = 5


def _storage_error(action, verb):
    """Roll back and report a failed database operation."""
    db.session.rollback()
    current_app.logger.exception(f"Error {action} script")
    return jsonify({'success': False, 'error': f'Failed to {verb} script'}), 500


def _not_found():
    return jsonify({'success': False, 'error': 'Script not found'}), 404


def _json_body():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _read_script_payload():
    data = _json_body()
    name = data.get('name')
    content = data.get('content')
    if not name or not content or not isinstance(name, str) or not isinstance(content, str):
        return None, None
    return name, content


@scripts_bp.route('', methods=['GET'])
@scripts_bp.route('/', methods=['GET'])
def list_scripts():
    """List scripts, newest first, optionally filtered by status."""
    status = request.args.get('status')

    query = Script.query
    if status and status != 'all':
        if status not in SCRIPT_STATUSES:
            return jsonify({'success': False, 'error': f'Unknown status: {status}'}), 400
        query = query.filter_by(status=status)

    try:
        scripts = query.order_by(Script.updated_at.desc(), Script.id.desc()).all()
    except SQLAlchemyError:
        return _storage_error('fetching', 'fetch')

    return jsonify({
        'success': True,
        'scripts': [script.to_dict() for script in scripts]
    })


@scripts_bp.route('', methods=['POST'])
@scripts_bp.route('/', methods=['POST'])
def create_script():
    """Create a script and record its check status."""
    name, content = _read_script_payload()
    if name is None:
        return jsonify({'success': False, 'error': 'Name and content are required'}), 400

    result = check_script(content)
    script = Script(name=name, content=content)
    script.apply_check(result)

    try:
        db.session.add(script)
        db.session.commit()
    except SQLAlchemyError:
        return _storage_error('creating', 'create')

    return jsonify({
        'success': True,
        'script': script.to_dict(),
        'check': result.to_dict()
    }), 201


@scripts_bp.route('/stats', methods=['GET'])
def get_stats():
    """Dashboard counters and most recently updated scripts."""
    try:
        total = Script.query.count()
        valid = Script.query.filter_by(status='valid').count()
        recent = Script.query.order_by(Script.updated_at.desc(), Script.id.desc()).limit(RECENT_SCRIPTS).all()
    except SQLAlchemyError:
        return _storage_error('fetching', 'fetch')

    return jsonify({
        'success': True,
        'totalScripts': total,
        'validScripts': valid,
        'errorScripts': total - valid,
        'recentScripts': [script.to_dict() for script in recent]
    })


@scripts_bp.route('/<int:script_id>', methods=['GET'])
def get_script(script_id):
    """Get a single script."""
    try:
        script = db.session.get(Script, script_id)
    except SQLAlchemyError:
        return _storage_error('fetching', 'fetch')
    if script is None:
        return _not_found()

    return jsonify({'success': True, 'script': script.to_dict()})


@scripts_bp.route('/<int:script_id>', methods=['PUT'])
def update_script(script_id):
    """Update a script and re-check its content."""
    name, content = _read_script_payload()
    if name is None:
        return jsonify({'success': False, 'error': 'Name and content are required'}), 400

    try:
        script = db.session.get(Script, script_id)
        if script is None:
            return _not_found()

        result = check_script(content)
        script.name = name
        script.content = content
        script.apply_check(result)
        script.touch()
        db.session.commit()
    except SQLAlchemyError:
        return _storage_error('updating', 'update')

    return jsonify({
        'success': True,
        'script': script.to_dict(),
        'check': result.to_dict()
    })


@scripts_bp.route('/<int:script_id>', methods=['DELETE'])
def delete_script(script_id):
    """Delete a script."""
    try:
        script = db.session.get(Script, script_id)
        if script is None:
            return _not_found()
        db.session.delete(script)
        db.session.commit()
    except SQLAlchemyError:
        return _storage_error('deleting', 'delete')

    return jsonify({'success': True, 'message': 'Script deleted successfully'})


@scripts_bp.route('/check-error', methods=['POST'])
def check_error():
    """Check script content without storing it."""
    data = _json_body()
    content = data.get('content')

    if not content or not isinstance(content, str):
        return jsonify({'success': False, 'error': 'Content is required'}), 400

    result = check_script(content)

    return jsonify({'success': True, **result.to_dict()})
