from flask import Flask, jsonify, render_template, request
from flask_cors import CORS

from .config import Settings
from .process_identifier import ProcessIdentifier
from .terminator import ProcessTerminator


def create_app(identifier: ProcessIdentifier = None, terminator: ProcessTerminator = None,
               settings: Settings = None) -> Flask:
    """Build the Flask app serving the dashboard and the process API"""
    app = Flask(__name__)
    CORS(app, send_wildcard=True, methods=['GET', 'POST', 'OPTIONS'])

    if identifier is None:
        settings = settings or Settings.from_env()
        identifier = ProcessIdentifier.from_settings(settings)
    terminator = terminator or ProcessTerminator()

    @app.after_request
    def allow_methods(response):
        response.headers.setdefault('Access-Control-Allow-Methods', 'GET, POST, OPTIONS')
        return response

    @app.before_request
    def short_circuit_options():
        if request.method == 'OPTIONS':
            return '', 200

    @app.route('/')
    @app.route('/index.html')
    def index():
        """Serve the dashboard"""
        return render_template('index.html')

    @app.route('/api/processes', methods=['GET'])
    def get_processes():
        """List processes listening on localhost, ordered by port"""
        processes = identifier.get_localhost_processes()
        return jsonify([p.to_dict() for p in processes])

    @app.route('/api/kill/<pid>', methods=['POST'])
    def kill_process(pid):
        """Force-kill a process by PID"""
        return jsonify(terminator.terminate(pid))

    @app.errorhandler(404)
    @app.errorhandler(405)
    def not_found(error):
        return 'Not Found', 404, {'Content-Type': 'text/plain; charset=utf-8'}

    return app
