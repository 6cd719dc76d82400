from datetime import datetime, timezone
from threading import Thread
import logging

from flask import Flask, jsonify

import config
from utils.logic import today_utc

# Disable Flask logging to keep console clean
log = logging.getLogger('werkzeug')
log.setLevel(logging.ERROR)


def create_app(started_at=None):
    started_at = started_at or datetime.now(timezone.utc)
    app = Flask(__name__)

    @app.route('/')
    @app.route('/health')
    def health():
        uptime = (datetime.now(timezone.utc) - started_at).total_seconds()
        return jsonify(
            status="ok",
            challenge_date=today_utc().isoformat(),
            uptime_seconds=int(uptime),
        )

    return app


def run(app):
    # Render assigns a port in the PORT env var
    app.run(host='0.0.0.0', port=config.PORT)


def keep_alive():
    t = Thread(target=run, args=(create_app(),), daemon=True)
    t.start()
    return t
