"""Initialize the Flask app and its extensions."""

import datetime
import json
import os

import firebase_admin
from firebase_admin import credentials, firestore
from flask import Flask, current_app, g, session
from flask.json.provider import DefaultJSONProvider
from werkzeug.middleware.proxy_fix import ProxyFix

from .extensions import csrf, mail


class FirestoreJSONProvider(DefaultJSONProvider):
    """JSON provider that writes Firestore timestamps as ISO 8601 strings."""

    @staticmethod
    def default(o):
        """Serialize datetimes before falling back to Flask's defaults."""
        if isinstance(o, (datetime.datetime, datetime.date)):
            return o.isoformat()
        return DefaultJSONProvider.default(o)


def _env_flag(name, default):
    """Read a boolean flag from the environment."""
    return (os.environ.get(name) or default).lower() in ["true", "1", "t"]


def _sanitize_mail_credential(value, strip_spaces=False):
    """Strip quotes pasted around mail credentials."""
    if not value:
        return value
    value = value.strip().strip("\"'")
    if strip_spaces:
        value = value.replace(" ", "")
    return value


def _init_firebase(app):
    """Initialize the Firebase Admin SDK from env, file or default credentials."""
    cred = None
    project_id = None

    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id")
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # If env var fails or is not present, try loading from file (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            try:
                with open(cred_path, "r") as f:
                    cred_info = json.load(f)
                project_id = cred_info.get("project_id")
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    # If both methods fail, fallback to default credentials
    if not cred:
        try:
            cred = credentials.ApplicationDefault()
            project_id = os.environ.get("FIREBASE_PROJECT_ID")
        except Exception as e:
            app.logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )

    if cred and not firebase_admin._apps:
        try:
            storage_bucket = os.environ.get("FIREBASE_STORAGE_BUCKET")
            if not storage_bucket and project_id:
                storage_bucket = f"{project_id}.firebasestorage.app"

            firebase_options = {"storageBucket": storage_bucket}
            if project_id:
                firebase_options["projectId"] = project_id

            firebase_admin.initialize_app(cred, firebase_options)
        except ValueError:
            # This can happen if the app is already initialized, which is fine.
            app.logger.info("Firebase app already initialized.")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)
    app.json = FirestoreJSONProvider(app)

    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        MAIL_SERVER=os.environ.get("MAIL_SERVER") or "smtp.gmail.com",
        MAIL_PORT=int(os.environ.get("MAIL_PORT") or 587),
        MAIL_USE_TLS=_env_flag("MAIL_USE_TLS", "true"),
        MAIL_USE_SSL=_env_flag("MAIL_USE_SSL", "false"),
        MAIL_USERNAME=_sanitize_mail_credential(os.environ.get("MAIL_USERNAME")),
        MAIL_PASSWORD=_sanitize_mail_credential(
            os.environ.get("MAIL_PASSWORD"), strip_spaces=True
        ),
        MAIL_DEFAULT_SENDER=os.environ.get("MAIL_DEFAULT_SENDER")
        or "noreply@dayshare.app",
        AI_BASE_URL=os.environ.get("AI_BASE_URL"),
        AI_API_KEY=os.environ.get("AI_API_KEY"),
        AI_MODEL=os.environ.get("AI_MODEL") or "gpt-4.1-nano",
        AI_TIMEOUT_SECONDS=float(os.environ.get("AI_TIMEOUT_SECONDS") or 15),
        CALENDAR_TIMEZONE=os.environ.get("CALENDAR_TIMEZONE") or "UTC",
        INVITE_TTL_DAYS=int(os.environ.get("INVITE_TTL_DAYS") or 7),
        SEND_INVITE_EMAILS=_env_flag("SEND_INVITE_EMAILS", "true"),
        PHOTO_URL_TTL_MINUTES=int(os.environ.get("PHOTO_URL_TTL_MINUTES") or 60),
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        _init_firebase(app)

    # Initialize extensions
    mail.init_app(app)
    csrf.init_app(app)

    # Register blueprints
    from . import auth as auth_bp

    app.register_blueprint(auth_bp.bp)

    from . import group as group_bp

    app.register_blueprint(group_bp.bp)

    from . import entry as entry_bp

    app.register_blueprint(entry_bp.bp)

    from . import notification as notification_bp

    app.register_blueprint(notification_bp.bp)

    from . import ai as ai_bp

    app.register_blueprint(ai_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    @app.before_request
    def load_logged_in_user():
        """If a user_id is in the session, load the user data from Firestore and store it in g."""
        user_id = session.get("user_id")
        g.user = None
        if user_id is None:
            return

        try:
            db = firestore.client()
            user_doc = db.collection("users").document(user_id).get()
            if user_doc.exists:
                g.user = user_doc.to_dict()
                g.user["uid"] = user_id
            else:
                # User ID in session but no user in DB. Clear the session.
                session.clear()
                current_app.logger.warning(
                    f"User {user_id} in session but not found in Firestore."
                )
        except Exception as e:
            current_app.logger.error(f"Error loading user from session: {e}")
            session.clear()

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app
