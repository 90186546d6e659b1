from flask import Blueprint

diagnostics_bp = Blueprint("diagnostics", __name__)

from . import routes  # noqa: E402, F401
