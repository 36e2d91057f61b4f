#!/usr/bin/env python3
"""
Battle Arena Core - Flask Web Application
Exposes the rating engine over JSON endpoints and the proctoring hub
over the /school Socket.IO namespace.
"""

import logging
from datetime import datetime
from typing import Optional, Set, Tuple

from flask import Flask, jsonify, request
from flask_socketio import SocketIO

from proctoring_hub.hub import ProctoringHub
from proctoring_hub.models import StudentEvent
from proctoring_hub.socket_handlers import register_school_namespace
from rating_engine.difficulty import target_difficulty
from rating_engine.elo import get_k_factor, update_rating
from rating_engine.matchmaking import InMemoryRatingStore, RatingStore, settle_head_to_head
from rating_engine.session_codes import SessionCodeExhausted, SessionCodeIssuer
from shared_utils.common import setup_logging
from shared_utils.config import ConfigurationService, PlatformConfiguration
from shared_utils.validation import InvalidArgument


logger = logging.getLogger(__name__)


def create_app(
    config: Optional[PlatformConfiguration] = None,
    hub: Optional[ProctoringHub] = None,
    rating_store: Optional[RatingStore] = None,
    code_issuer: Optional[SessionCodeIssuer] = None
) -> Tuple[Flask, SocketIO]:
    """
    Build the Flask app and its Socket.IO server.

    Args:
        config: Platform configuration, loaded from file and env if None
        hub: Proctoring hub, built from the configuration if None
        rating_store: Store the settle endpoint reads and writes
        code_issuer: Join code issuer

    Returns:
        Tuple of (app, socketio)
    """
    config = config or ConfigurationService().load_configuration()
    hub = hub or ProctoringHub(config)
    rating_store = rating_store or InMemoryRatingStore()
    code_issuer = code_issuer or SessionCodeIssuer(max_attempts=config.session_code_max_attempts)
    active_codes: Set[str] = set()

    app = Flask(__name__)
    app.extensions['proctoring_hub'] = hub
    app.extensions['rating_store'] = rating_store
    app.extensions['active_codes'] = active_codes

    socketio = SocketIO(app, cors_allowed_origins="*", async_mode="threading")
    register_school_namespace(socketio, hub, config.monitor_namespace)

    @app.errorhandler(InvalidArgument)
    def invalid_argument(error):
        return jsonify({'error': str(error)}), 400

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({'error': 'Internal server error'}), 500

    @app.route('/api/ratings/update', methods=['POST'])
    def rating_update():
        """Compute one participant's rating after a match."""
        data = request.get_json(silent=True) or {}
        current_rating = data.get('currentRating')
        new_rating = update_rating(current_rating, data.get('opponentRating'), data.get('actualScore'))
        return jsonify({
            'newRating': new_rating,
            'ratingChange': new_rating - current_rating,
            'kFactor': get_k_factor(current_rating)
        })

    @app.route('/api/difficulty')
    def difficulty():
        rating = request.args.get('rating', type=float)
        if rating is None:
            raise InvalidArgument("Query parameter 'rating' must be a number")
        return jsonify({'targetDifficulty': target_difficulty(rating)})

    @app.route('/api/session-codes', methods=['POST'])
    def issue_session_code():
        """Issue a join code not held by any live session."""
        try:
            code = code_issuer.issue_unique_code(lambda candidate: candidate in active_codes)
        except SessionCodeExhausted as e:
            return jsonify({'error': str(e)}), 503
        active_codes.add(code)
        return jsonify({'code': code}), 201

    @app.route('/api/session-codes/<code>', methods=['DELETE'])
    def release_session_code(code):
        active_codes.discard(code)
        return '', 204

    @app.route('/api/battles/settle', methods=['POST'])
    def settle_battle():
        """Settle a finished 1v1 battle."""
        data = request.get_json(silent=True) or {}
        first = data.get('first') or {}
        second = data.get('second') or {}
        if not first.get('participantId') or not second.get('participantId'):
            raise InvalidArgument("Both 'first' and 'second' need a participantId")

        results = settle_head_to_head(
            rating_store,
            str(first['participantId']), first.get('points', 0),
            str(second['participantId']), second.get('points', 0),
            default_rating=config.default_rating
        )
        return jsonify({'results': [result.to_dict() for result in results]})

    @app.route('/api/exams/<exam_id>/monitors')
    def exam_monitors(exam_id):
        members = hub.room_members(exam_id)
        return jsonify({'examId': exam_id, 'monitors': members, 'count': len(members)})

    @app.route('/api/exams/<exam_id>/events', methods=['POST'])
    def publish_exam_event(exam_id):
        """Broadcast a reported student event to the exam's monitors."""
        data = request.get_json(silent=True) or {}
        try:
            event = StudentEvent.from_dict(data)
        except (KeyError, ValueError) as e:
            raise InvalidArgument(f"Invalid student event: {e}") from e
        delivered = hub.publish_event(exam_id, event)
        return jsonify({'delivered': delivered}), 202

    @app.route('/health')
    def health_check():
        """Health check endpoint."""
        return jsonify({
            'status': 'healthy',
            'timestamp': datetime.now().isoformat(),
            'components': {
                'flask': True,
                'proctoring_hub': hub.get_status()
            }
        })

    return app, socketio


if __name__ == '__main__':
    platform_config = ConfigurationService().load_configuration()
    setup_logging(
        '',
        level=getattr(logging, platform_config.log_level.upper(), logging.INFO),
        log_file=platform_config.log_file
    )
    app, socketio = create_app(platform_config)
    logger.info("Starting battle arena core on port 5000")
    socketio.run(app, host='0.0.0.0', port=5000, allow_unsafe_werkzeug=True)
