from flask import jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate


db = SQLAlchemy()
login_manager = LoginManager()
migrate = Migrate()



def init_extensions(app):
    """Initialize Flask extensions"""
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    login_manager.login_message_category = "info"

    return app


@login_manager.unauthorized_handler
def unauthorized():
    # API only, no login page to redirect to
    return jsonify({"error": "Access denied. Please log in."}), 401
