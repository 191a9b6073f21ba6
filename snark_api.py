"""HTTP endpoint for the snark status-line widget.

Routes:
- GET/POST /api/snark   -> {"snark": "..."}; add ?debug=1 for the diagnostic record
- GET      /health      -> {"status": "ok"}
"""

import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify, request

from snark.config import TRUE_VALUES, SnarkConfig
from snark.service import SnarkService

load_dotenv()

logging.basicConfig(level=os.environ.get('SNARK_LOG_LEVEL', 'INFO').upper(),
                    format='%(asctime)s %(levelname)s %(message)s')
logger = logging.getLogger(__name__)


def _debug_requested() -> bool:
    flag = request.args.get('debug')
    if flag is None and request.method == 'POST':
        data = request.get_json(silent=True) or {}
        if isinstance(data, dict):
            flag = data.get('debug')
    if isinstance(flag, bool):
        return flag
    return str(flag or '').strip().lower() in TRUE_VALUES


def create_app(config: SnarkConfig = None, service: SnarkService = None) -> Flask:
    """Build the Flask app around one service instance.

    Args:
        config: Process configuration (read from the environment when None)
        service: Pre-built service, mainly for tests

    Returns:
        Flask application
    """
    config = config or SnarkConfig.from_env(dotenv=False)
    service = service or SnarkService(config)
    app = Flask(__name__)

    @app.route('/health', methods=['GET'])
    def health_check():
        return jsonify({'status': 'ok'}), 200

    @app.route('/api/snark', methods=['GET', 'POST'])
    def snark_endpoint():
        debug = _debug_requested()
        logger.debug(f"/api/snark called (debug={debug})")
        result = service.handle(debug=debug)
        response = jsonify(result.body)
        response.status_code = result.status
        for key, value in result.headers.items():
            response.headers[key] = value
        return response

    return app


app = create_app()


if __name__ == '__main__':
    port = int(os.environ.get('SNARK_PORT', '5700'))
    app.run(host='0.0.0.0', port=port)
