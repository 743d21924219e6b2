from flask import render_template, jsonify, request

def request_wants_json():
    """Check if the request is expecting JSON"""
    best = request.accept_mimetypes.best_match(['application/json', 'text/html'])
    return (best == 'application/json' or
            request.path.startswith('/api/') or
            request.headers.get('X-Requested-With') == 'XMLHttpRequest' or
            'application/json' in request.headers.get('Accept', ''))

def error_response(code, message):
    """Build a JSON or HTML error response"""
    if request_wants_json():
        return jsonify({
            'status': 'error',
            'message': message,
            'code': code
        }), code
    return render_template(f'errors/{code}.html', message=message), code

class ApiError(Exception):
    """Base exception for API errors"""
    def __init__(self, message, status_code=400, payload=None):
        self.message = message
        self.status_code = status_code
        self.payload = payload
        super().__init__(self.message)

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['status'] = 'error'
        rv['message'] = self.message
        rv['code'] = self.status_code
        return rv

def register_handlers(app):
    """Register error handlers with the Flask app"""

    @app.errorhandler(400)
    def bad_request_error(error):
        """Handle 400 Bad Request errors"""
        return error_response(400, 'Bad request')

    @app.errorhandler(401)
    def unauthorized_error(error):
        """Handle 401 Unauthorized errors"""
        return error_response(401, 'Authentication required')

    @app.errorhandler(403)
    def forbidden_error(error):
        """Handle 403 Forbidden errors"""
        return error_response(403, 'Access forbidden')

    @app.errorhandler(404)
    def not_found_error(error):
        """Handle 404 Not Found errors"""
        return error_response(404, 'Resource not found')

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 Internal Server Error"""
        app.logger.error(f'Server Error: {error}')
        return error_response(500, 'Internal server error')

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        """Handle custom API errors"""
        response = jsonify(error.to_dict())
        response.status_code = error.status_code
        return response
