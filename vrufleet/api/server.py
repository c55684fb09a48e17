from __future__ import annotations
from dataclasses import asdict
from typing import Any
import logging

from flask import Flask, request, jsonify, Response

from vrufleet.api import service
from vrufleet.config.env import get_server_config
from vrufleet.exports.writers import (
    write_daily, write_fleet_aggregate, write_hourly, write_monthly, write_projection,
)

logger = logging.getLogger("vrufleet.api")

app = Flask(__name__)

_ARRAYS = ("hourly", "daily", "monthly")


def _fleet_ids() -> list[str] | None:
    raw = request.args.get('ids')
    if raw is None:
        return None
    return [i.strip() for i in raw.split(',') if i.strip()]


def _window() -> str:
    return request.args.get('window', '2025')


def _csv(body: str, name: str) -> Response:
    return Response(body, mimetype='text/csv', headers={
        'Content-Disposition': f'attachment; filename="{name}.csv"'
    })


@app.errorhandler(ValueError)
def _bad_request(e: ValueError):
    logger.warning("Rejected %s %s: %s", request.method, request.path, e)
    return jsonify({'error': str(e)}), 400


@app.get('/healthz')
def healthz():
    return jsonify({'status': 'ok', 'assets': len(service.REPOSITORY)})


@app.get('/assets/<asset_id>')
def get_asset(asset_id: str):
    rec = service.get_asset_data(asset_id)
    include = request.args.get('include')
    wanted = set(_ARRAYS) if include is None else {p.strip() for p in include.split(',')}
    body: dict[str, Any] = {
        'id': rec.id,
        'strategy': rec.strategy,
        'config': asdict(rec.config),
    }
    for name in _ARRAYS:
        if name in wanted:
            body[name] = [asdict(r) for r in getattr(rec, name)]
    return jsonify(body)


@app.patch('/assets/<asset_id>/config')
def patch_config(asset_id: str):
    payload = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict) or not payload:
        return jsonify({'error': 'config patch must be a non-empty JSON object'}), 400
    rec = service.update_asset_config(asset_id, payload)
    return jsonify({'id': rec.id, 'config': asdict(rec.config), 'monthly': [asdict(m) for m in rec.monthly]})


@app.get('/assets/<asset_id>/<series>.csv')
def get_asset_csv(asset_id: str, series: str):
    writers = {'daily': write_daily, 'monthly': write_monthly, 'hourly': write_hourly}
    if series not in writers:
        return jsonify({'error': 'unknown_series'}), 404
    rec = service.get_asset_data(asset_id)
    return _csv(writers[series](getattr(rec, series)), f"{asset_id}_{series}")


@app.get('/fleet/aggregate')
def fleet_aggregate():
    rows = service.get_fleet_aggregate(_window(), _fleet_ids())
    return jsonify({'window': _window(), 'rows': [asdict(r) for r in rows]})


@app.get('/fleet/aggregate.csv')
def fleet_aggregate_csv():
    rows = service.get_fleet_aggregate(_window(), _fleet_ids())
    return _csv(write_fleet_aggregate(rows), f"fleet_{_window()}")


@app.get('/fleet/summary')
def fleet_summary():
    return jsonify(service.get_fleet_summary(_window(), _fleet_ids()))


@app.get('/fleet/projection')
def fleet_projection():
    return jsonify(service.get_fleet_projection(_window(), _fleet_ids()))


@app.get('/fleet/projection.csv')
def fleet_projection_csv():
    proj = service.get_fleet_projection(_window(), _fleet_ids())
    return _csv(write_projection(proj['months']), f"projection_{_window()}")


if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    cfg = get_server_config()
    app.run(host=cfg.host, port=cfg.port)
