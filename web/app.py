"""
Liquidity Planner - Flask Web Application

JSON API around the weekly liquidity forecast engine.
"""

import os
import logging
from datetime import date

from flask import Flask, request, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from config.settings import get_config
from liquidity.config import ForecastRequest, InvalidForecastConfig
from liquidity.demo_data import DemoLedgerGenerator, RISK_SCENARIOS
from liquidity.forecasting import LiquidityProjector
from liquidity.models import Booking, InvalidBookingError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# =============================================================================
# App Factory
# =============================================================================

def create_app(config_class=None, today=None):
    """
    Create Flask application.

    Args:
        config_class: Settings class (defaults to the FLASK_ENV selection)
        today: Callable returning the forecast reference date
    """
    app = Flask(__name__)

    # Load configuration
    if config_class is None:
        config_class = get_config()
    app.config.from_object(config_class)

    # The only clock read of the service; the engine receives it as `now`
    today = today or date.today

    # Rate limiting
    limiter = Limiter(
        key_func=get_remote_address,
        app=app,
        default_limits=[app.config['RATELIMIT_DEFAULT']]
    )
    # The extension only holds a weak reference to its limiter
    app.extensions['liquidity_limiter'] = limiter

    projector = LiquidityProjector()

    # =============================================================================
    # API Routes - Liquidity Forecast
    # =============================================================================

    @app.route('/api/health', methods=['GET'])
    def api_health():
        """Liveness check"""
        return jsonify({'status': 'ok'})

    @app.route('/api/liquidity-forecast', methods=['POST'])
    @limiter.limit(lambda: app.config['RATELIMIT_FORECAST'])
    def api_liquidity_forecast():
        """Generate the weekly liquidity forecast"""
        data = request.get_json(silent=True) or {}

        raw_bookings = data.get('bookings')
        if not isinstance(raw_bookings, list) or not raw_bookings:
            return jsonify({'error': 'bookings array must exist and have at least one item'}), 400

        try:
            bookings = [Booking.from_dict(item) for item in raw_bookings]
            forecast_request = ForecastRequest(
                start_balance=data.get('startBalance'),
                now=today(),
                threshold=data.get('threshold', app.config['FORECAST_THRESHOLD']),
                weeks=data.get('weeks', app.config['FORECAST_WEEKS'])
            ).validate()
        except (InvalidBookingError, InvalidForecastConfig) as e:
            return jsonify({'error': str(e)}), 400

        result = projector.project(bookings, forecast_request)

        return jsonify(result.to_dict())

    @app.route('/api/liquidity-forecast/demo', methods=['GET'])
    @limiter.limit(lambda: app.config['RATELIMIT_FORECAST'])
    def api_demo_forecast():
        """Forecast a generated demo ledger"""
        scenario = request.args.get('scenario', 'healthy')
        if scenario not in RISK_SCENARIOS:
            return jsonify({
                'error': f"Unknown scenario '{scenario}'",
                'scenarios': sorted(RISK_SCENARIOS)
            }), 400

        seed = request.args.get('seed', 42, type=int)
        now = today()

        ledger = DemoLedgerGenerator(seed=seed).generate_ledger(end_date=now, risk_scenario=scenario)
        forecast_request = ForecastRequest(
            start_balance=ledger.start_balance,
            now=now,
            threshold=app.config['FORECAST_THRESHOLD'],
            weeks=app.config['FORECAST_WEEKS']
        )
        result = projector.project(ledger.bookings, forecast_request)

        return jsonify({
            'scenario': ledger.scenario,
            'description': ledger.description,
            'booking_count': len(ledger.bookings),
            'forecast': result.to_dict()
        })

    # =============================================================================
    # Error Handlers
    # =============================================================================

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(429)
    def rate_limited(e):
        return jsonify({'error': 'Too many requests, please retry later'}), 429

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f"Server error: {e}")
        return jsonify({'error': 'Liquidity forecast failed'}), 500

    return app


# =============================================================================
# Main
# =============================================================================

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('FLASK_DEBUG', 'True').lower() == 'true'
    create_app().run(debug=debug, port=port, host='0.0.0.0')
