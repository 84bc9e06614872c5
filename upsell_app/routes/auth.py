from flask import Blueprint, current_app, flash, redirect, render_template, url_for
from flask_login import login_required, login_user, logout_user

from ..forms import LoginForm
from ..store import get_upsell_store
from ..user import ShopSession

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    stores = current_app.config["STORES"]
    form = LoginForm()
    form.store.choices = [(key, store["name"]) for key, store in stores.items()]

    if form.validate_on_submit():
        store = stores.get(form.store.data)
        if store and form.password.data == current_app.config["ADMIN_PASSWORD"]:
            # First login creates the shop row
            get_upsell_store().get_or_create_shop(store["domain"])
            login_user(ShopSession.from_config(form.store.data, store))
            return redirect(url_for('main.index'))
        flash("Invalid credentials", "danger")

    return render_template('auth/login.html', form=form)


@auth_bp.route('/logout')
@login_required
def logout():
    logout_user()
    flash("You have been logged out.", "info")
    return redirect(url_for('auth.login'))
