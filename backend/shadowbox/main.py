from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    service = current_app.extensions['shadowbox']
    with service.lock:
        live = len(service.registry)
    return jsonify({
        'message': 'Welcome to the Shadowbox match server!',
        'live_matches': live,
    })
