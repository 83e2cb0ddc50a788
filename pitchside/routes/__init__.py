"""Routes package for the Pitchside backend."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .articles import articles_bp
    from .translate import translate_bp
    from .admin import admin_bp

    app.register_blueprint(articles_bp, url_prefix='/api/articles')
    app.register_blueprint(translate_bp, url_prefix='/api')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')
