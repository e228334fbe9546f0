from flask import Blueprint, render_template

bp = Blueprint('public', __name__)


@bp.get('/')
@bp.get('/admin')
@bp.get('/admin.html')
def admin_page():
    return render_template('admin.html', title='Deliveries')


@bp.get('/client')
@bp.get('/cliente.html')
def client_page():
    return render_template('client.html', title='Delivery')


@bp.get('/confirmar')
@bp.get('/confirmar.html')
def confirm_page():
    return render_template('confirm.html', title='Confirm delivery')


@bp.get('/favicon.ico')
def favicon():
    return '', 204
