from flask import Blueprint, jsonify, request, current_app, send_file, abort
from datetime import date, datetime, timezone
import io
from loguru import logger
from .errors import EmptyReport, ReportRenderError
from .services.deliveries import load_confirmed, load_pending, clear_confirmed, pending_lock
from .services.tokens import issue_token, parse_products
from .services.report import render_report

bp = Blueprint('admin', __name__)


def _issue(cliente: str, ruta: str):
    products = parse_products(request.args.get('productos', '[]'))
    issued = issue_token(cliente, ruta, products)
    return jsonify({'token': issued.token, 'urlCliente': issued.claim_url})


@bp.get('/generate-token')
def generate_token():
    return _issue(request.args.get('cliente', 'Cliente Test'), request.args.get('ruta', 'Ruta Test'))


@bp.get('/generar-qr/<cliente>/<ruta>')
def generate_token_path(cliente: str, ruta: str):
    return _issue(cliente, ruta)


@bp.get('/asistencias')
def confirmed_deliveries():
    return jsonify([c.to_public() for c in load_confirmed()])


@bp.get('/finalizar-pdf')
def finalize_pdf():
    try:
        pdf = render_report(load_confirmed())
    except EmptyReport:
        return 'No confirmed deliveries to report yet.', 400, {'Content-Type': 'text/plain; charset=utf-8'}
    except ReportRenderError as e:
        logger.error("report render failed: {}", e)
        return f'PDF error: {e}', 500, {'Content-Type': 'text/plain; charset=utf-8'}
    return send_file(
        io.BytesIO(pdf), mimetype='application/pdf', as_attachment=True,
        download_name=f"reporte-{date.today().isoformat()}.pdf", etag=False,
    )


@bp.delete('/borrar-logs')
def reset_report():
    clear_confirmed()
    logger.info("confirmed log reset")
    return jsonify({'ok': True, 'msg': 'Report reset'})


@bp.get('/debug-tokens')
def debug_tokens():
    if not current_app.config.get('DEBUG_ROUTES'):
        abort(404)
    with pending_lock():
        entries = load_pending()
    return jsonify([
        {
            'token': e.token,
            'cliente': e.client,
            'productos': [p.to_public() for p in e.products],
            'expira': datetime.fromtimestamp(e.expires_at / 1000, timezone.utc).isoformat(),
            'asistido': e.confirmed,
        }
        for e in entries
    ])
