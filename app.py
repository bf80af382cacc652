from flask import Flask, jsonify
from datetime import datetime
import os
from werkzeug.exceptions import HTTPException
from config import Config
from extensions import db, mail, migrate, login_manager
from services.errors import PortalError


def create_app(test_config=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Upload folders for complaint / article images
    for kind in ("complaints", "articles"):
        os.makedirs(os.path.join(app.config["UPLOAD_FOLDER"], kind), exist_ok=True)

    # Init db, migrate, mail, login
    db.init_app(app)
    migrate.init_app(app, db)
    mail.init_app(app)
    login_manager.init_app(app)

    # Import models after db init
    from models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"error": "Authentication required."}), 401

    # Blueprints
    from blueprints.auth.routes import auth_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")

    from blueprints.account.routes import account_bp
    app.register_blueprint(account_bp)

    from blueprints.portal.routes import portal_bp
    app.register_blueprint(portal_bp)

    from blueprints.admin.routes import admin_bp
    app.register_blueprint(admin_bp, url_prefix="/admin")

    @app.errorhandler(PortalError)
    def handle_portal_error(err):
        return jsonify({"error": err.message}), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err):
        return jsonify({"error": err.description}), err.code

    @app.route("/")
    def home():
        return jsonify({"message": "Civic portal API is running", "year": datetime.now().year})

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
