import logging

from flask import Flask, session

from .config import Config
from .extensions import ClinicApi
from dental_portal.models.notification import avatar_seed, notification_badge
from dental_portal.services.payment_modal import format_amount

def create_app(config_class=Config, transport=None):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    ClinicApi(app, transport=transport)

    from .controllers.auth_controller import auth_bp
    from .controllers.patient_controller import patient_bp
    from .controllers.doctor_controller import doctor_bp
    from .controllers.admin_controller import admin_bp
    from .controllers.booking_controller import booking_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(patient_bp)
    app.register_blueprint(doctor_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(booking_bp)

    app.jinja_env.filters["money"] = format_amount
    app.jinja_env.globals["notification_badge"] = notification_badge
    app.jinja_env.globals["avatar_seed"] = avatar_seed

    @app.context_processor
    def inject_unseen_notifications():
        return {"unseen_notifications": session.get("unseen_notifications", 0)}

    return app
