from flask import Blueprint, request, jsonify, Response
from loguru import logger
from .errors import DeliveryNotFound
from .services.confirm import confirm
from .services.deliveries import find_active, short
from .services.qr import render_qr, to_data_url

bp = Blueprint('api', __name__)


@bp.get('/qr-image/<token>')
def qr_image(token: str):
    try:
        png = render_qr(token)
    except DeliveryNotFound as e:
        logger.warning("qr refused for {}: {}", short(token), e.reason)
        return Response('Expired, already used or invalid', status=404, mimetype='text/plain')
    if request.args.get('format') == 'dataurl':
        return Response(to_data_url(png), mimetype='text/plain', headers={'Cache-Control': 'no-store'})
    return Response(png, mimetype='image/png', headers={'Cache-Control': 'no-store'})


@bp.post('/confirmar-sub')
def confirm_sub():
    data = request.get_json(silent=True) or {}
    result = confirm(data.get('mainToken'), data.get('subToken'), data.get('timestamp'))
    return jsonify(result.to_dict())


@bp.get('/get-entrega/<token>')
def get_delivery(token: str):
    try:
        entry = find_active(token)
    except DeliveryNotFound as e:
        logger.info("entrega lookup for {}: {}", short(token), e.reason)
        return jsonify({'error': 'invalid_token'}), 404
    return jsonify({
        'cliente': entry.client,
        'ruta': entry.route,
        'productos': [p.to_public() for p in entry.products],
    })
