from flask import current_app, render_template, request
from flask_login import current_user, login_required

from upsell_app.services.selection import apply_selection, load_selection
from upsell_app.store import get_upsell_store
from upsell_app.utils.response import json_response
from . import main


@main.route('/', methods=['GET'])
@login_required
def index():
    data = load_selection(
        get_upsell_store(),
        current_user.store,
        page_size=current_app.config["CATALOG_PAGE_SIZE"],
    )
    data["store_name"] = current_user.name
    return render_template('index.html', data=data)


@main.route('/', methods=['POST'])
@login_required
def save_selection():
    payload, code = apply_selection(
        get_upsell_store(),
        current_user.domain,
        request.form.get('intent', 'save'),
        request.form.getlist('selectedProducts'),
    )
    return json_response(payload, code)
