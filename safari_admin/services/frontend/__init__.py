from flask import Blueprint
import os

template_dir = os.path.join(os.path.dirname(__file__), "templates")
static_dir = os.path.join(os.path.dirname(__file__), "static")
frontend_bp = Blueprint(
    "frontend", __name__,
    template_folder=template_dir,
    static_folder=static_dir,
    static_url_path="/admin-static",
)

from . import routes  # noqa: E402, F401
