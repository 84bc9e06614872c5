from flask import Blueprint

main = Blueprint('main', __name__)

from . import index, api  # noqa: E402,F401
