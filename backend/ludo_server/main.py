from flask import Blueprint, jsonify

from ludo_server import get_session

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Ludo game server!', 'rooms': len(get_session().registry)})
