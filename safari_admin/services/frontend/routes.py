import logging
import os
import secrets
from functools import wraps

from flask import (
    current_app, flash, redirect, render_template, request, send_from_directory,
    session, url_for,
)

from . import frontend_bp
from ..assets.slots import categories
from ..assets.storage import CLOUDINARY, LOCAL

logger = logging.getLogger(__name__)


def admin_required(f):
    @wraps(f)
    def wrapped(*args, **kwargs):
        if not session.get("is_admin"):
            return redirect(url_for("frontend.login", next=request.path))
        return f(*args, **kwargs)
    return wrapped


@frontend_bp.route("/")
def index():
    return render_template("index.html", categories=categories())


@frontend_bp.route("/admin/login", methods=["GET", "POST"])
def login():
    if request.method == "POST":
        expected = current_app.config["ADMIN_PASSWORD"]
        password = request.form.get("password", "")
        if not expected:
            logger.warning("Admin login attempted but ADMIN_PASSWORD is not set")
            flash("Admin login is disabled until ADMIN_PASSWORD is configured.", "danger")
        elif secrets.compare_digest(password.encode(), expected.encode()):
            session["is_admin"] = True
            target = request.args.get("next", "")
            # only local paths
            if not target.startswith("/") or target.startswith("//"):
                target = url_for("frontend.admin")
            return redirect(target)
        else:
            flash("Incorrect password", "danger")
    return render_template("login.html")


@frontend_bp.route("/admin/logout", methods=["POST"])
def logout():
    session.pop("is_admin", None)
    return redirect(url_for("frontend.index"))


@frontend_bp.route("/admin")
@admin_required
def admin():
    credentials = current_app.config["CLOUDINARY_CREDENTIALS"]
    return render_template(
        "admin.html",
        categories=categories(),
        backends=[LOCAL, CLOUDINARY],
        default_backend=current_app.config["STORAGE_BACKEND"],
        cloudinary_configured=credentials.configured,
        public_base_url=current_app.config["PUBLIC_BASE_URL"],
        max_upload_bytes=current_app.config["MAX_UPLOAD_BYTES"],
    )


@frontend_bp.route("/assets/<path:filename>")
def asset_file(filename):
    return send_from_directory(
        os.path.join(current_app.config["PUBLIC_DIR"], "assets"), filename
    )


@frontend_bp.route("/uploads/<path:filename>")
def legacy_upload_file(filename):
    return send_from_directory(
        os.path.join(current_app.config["PUBLIC_DIR"], "uploads"), filename
    )
