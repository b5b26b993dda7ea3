from flask import Blueprint, current_app, jsonify

matches = Blueprint('matches', __name__)

@matches.route('/<string:match_code>', methods=['GET'])
def get_match_state(match_code):
    """
    Returns a read-only snapshot of a live match.
    """
    state = current_app.extensions['shadowbox'].snapshot(match_code)
    if state is None:
        return jsonify({'error': 'Match not found'}), 404
    return jsonify(state), 200
