from flask import Blueprint, Response, current_app, jsonify, request

from gymdesk.models.database import current_db_path, reset_all_data
from gymdesk.utils.csv_export import EXPORTS, build_export
from gymdesk.utils.decorators import admin_required, json_endpoint
from gymdesk.utils.errors import BadRequest

data_bp = Blueprint('data', __name__)


@data_bp.route('/export', methods=['GET'])
@admin_required
@json_endpoint
def export_csv():
    export_type = request.args.get('type')
    if export_type not in EXPORTS:
        raise BadRequest('Invalid export type. Use: ' + ', '.join(EXPORTS))
    filename, csv_data = build_export(export_type)
    return Response(
        csv_data,
        content_type='text/csv; charset=utf-8',
        headers={'Content-Disposition': f'attachment; filename={filename}'},
    )


@data_bp.route('/reset', methods=['POST'])
@admin_required
@json_endpoint
def reset():
    """Irreversible: wipes every table."""
    removed = reset_all_data(current_db_path())
    current_app.logger.warning("All data reset (%s rows removed)", removed)
    return jsonify({'message': 'All data has been reset successfully'})
