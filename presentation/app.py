"""Flask application factory for Tasklist CalDAV Server."""

import logging
from datetime import datetime, timezone
from functools import wraps
from typing import Optional

from flask import Flask, request, Response, jsonify, g
from werkzeug.security import check_password_hash

from config import Config
from application import CalDAVService, RightsResolver, TeamListService
from infrastructure import InMemoryRepository
from monitoring.exceptions import AuthenticationError, TasklistCalDAVError, error_handler
from .routes import register_caldav_routes, register_sharing_routes


DAV_HEADER = '1, 2, 3, calendar-access'
ALLOWED_METHODS = 'OPTIONS, GET, HEAD, PUT, DELETE'


def create_app(config: Config, repository: Optional[InMemoryRepository] = None) -> Flask:
    """Create Flask application with dependency injection."""
    app = Flask(__name__)
    app.config['CONFIG'] = config
    logger = logging.getLogger(__name__)

    if repository is None:
        if config.storage.data_file:
            repository = InMemoryRepository.from_file(config.storage.data_file)
        else:
            logger.warning("No data file configured, starting with an empty store")
            repository = InMemoryRepository()

    rights = RightsResolver(repository, repository)
    caldav_service = CalDAVService(
        project_repository=repository,
        rights=rights,
        tz=config.service.get_time_zone(),
        product_id=config.caldav.product_id
    )
    team_list_service = TeamListService(repository, repository, rights)

    # Authentication
    def authenticate():
        """Send 401 authentication challenge."""
        return Response(
            'Authentication required',
            401,
            {'WWW-Authenticate': f'Basic realm="{config.caldav.realm}"'}
        )

    def requires_auth(f):
        """Authentication decorator; puts the authenticated user on ``g.user``."""
        @wraps(f)
        def decorated(*args, **kwargs):
            auth = request.authorization
            if not auth or not auth.username:
                return authenticate()
            user = repository.get_user_by_username(auth.username)
            if user is None or not user.password_hash or \
                    not check_password_hash(user.password_hash, auth.password or ''):
                error_handler.handle_error(
                    AuthenticationError(f"Failed login for {auth.username}"),
                    context='auth'
                )
                return authenticate()
            g.user = user
            return f(*args, **kwargs)
        return decorated

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        stats = error_handler.get_error_stats()
        return jsonify({
            'status': 'healthy',
            'service': 'Tasklist CalDAV Server',
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'timezone': config.service.timezone,
            'error_count': stats['total_errors']
        })

    @app.route('/', methods=['OPTIONS'])
    @app.route('/calendars/<int:project_id>/', methods=['OPTIONS'])
    @app.route('/calendars/<int:project_id>/<uid>.ics', methods=['OPTIONS'])
    def options_handler(**kwargs):
        """Universal OPTIONS handler."""
        response = Response()
        response.headers['Allow'] = ALLOWED_METHODS
        response.headers['DAV'] = DAV_HEADER
        response.headers['Content-Length'] = '0'
        return response

    register_caldav_routes(app, caldav_service, requires_auth)
    register_sharing_routes(app, team_list_service, requires_auth)

    @app.errorhandler(TasklistCalDAVError)
    def handle_app_error(error: TasklistCalDAVError):
        error_handler.handle_error(error, context=request.endpoint or request.path)
        return jsonify({
            'message': error.message,
            'code': error.error_code.value
        }), error.http_status

    @app.errorhandler(404)
    def not_found(error):
        return Response(status=404)

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}")
        return Response(status=500)

    return app
