from flask import Flask, request, jsonify

from config import settings
from core.order_engine import KioskOrderEngine
from models.product import ProductDefinition, parse_bool


def _status_code(result):
    return 200 if result.get("success") else 400


def _json_body():
    # JSON 객체가 아닌 본문(배열, 문자열, 파싱 실패)은 빈 객체로 취급
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def create_app(db_path=None):
    """Build the kiosk API app around one KioskOrderEngine"""
    app = Flask(__name__)
    app.secret_key = settings.secret_key

    engine = KioskOrderEngine(db_path)
    app.config["ENGINE"] = engine

    @app.route('/health')
    def health():
        """Health check endpoint"""
        return jsonify({'status': 'ok', 'message': 'Coffee kiosk order engine is running!'})

    @app.route('/api/products', methods=['GET'])
    def list_products():
        """Menu with live availability"""
        return jsonify(engine.get_menu(request.args.get('category')))

    @app.route('/api/products', methods=['POST'])
    def save_product():
        """Create or replace a product configuration"""
        data = _json_body()
        if not data.get('id') or not data.get('name'):
            return jsonify({'success': False, 'error': 'Product id and name are required.'}), 400
        try:
            product = ProductDefinition.from_dict(data)
        except (TypeError, ValueError) as e:
            return jsonify({'success': False, 'error': f'Invalid product: {e}'}), 400
        result = engine.save_product(product)
        return jsonify(result), _status_code(result)

    @app.route('/api/products/availability', methods=['GET'])
    def availability_summary():
        """Availability statistics for dashboards"""
        return jsonify({'success': True, 'availability': engine.get_availability_summary()})

    @app.route('/api/orders/compose', methods=['POST'])
    def compose_order_line():
        """Preview the order line for a product + selection"""
        data = _json_body()
        result = engine.compose_order_line(
            data.get('product_id'), data.get('selection'), data.get('quantity', 1)
        )
        return jsonify(result), _status_code(result)

    @app.route('/api/orders', methods=['GET'])
    def list_orders():
        """Active and historical orders"""
        limit = request.args.get('limit', 100, type=int)
        return jsonify(engine.list_orders(limit))

    @app.route('/api/orders', methods=['POST'])
    def place_order():
        """Create an order and queue it for the machine"""
        data = _json_body()
        result = engine.place_order(data.get('items') or [], data.get('order_num'))
        return jsonify(result), _status_code(result)

    @app.route('/api/orders/<order_id>', methods=['GET'])
    def get_order(order_id):
        """Order details with aggregate status"""
        result = engine.get_order_status(order_id)
        return jsonify(result), (200 if result.get('success') else 404)

    @app.route('/api/orders/<order_id>/cancel', methods=['POST'])
    def cancel_order(order_id):
        """Cancel every item of an order, reporting per item"""
        data = _json_body()
        try:
            confirm_force = parse_bool(data.get('confirm_force'), False, 'confirm_force')
        except ValueError as e:
            return jsonify({'success': False, 'error': str(e)}), 400
        result = engine.cancel_order(order_id, confirm_force)
        if result['error'] is not None:
            return jsonify(result), 409
        # 일부 아이템 실패는 207 (아이템별 결과 포함)
        return jsonify(result), (200 if result['success'] else 207)

    @app.route('/api/order-items/<order_item_id>/status', methods=['POST'])
    def update_item_status(order_item_id):
        """Machine/staff callback for one item's status"""
        data = _json_body()
        if 'status' not in data:
            return jsonify({'success': False, 'error': 'status is required.'}), 400
        result = engine.update_item_status(order_item_id, data['status'])
        return jsonify(result), _status_code(result)

    @app.route('/api/device/status', methods=['POST'])
    def record_device_status():
        """Latest ingredient readings from the machine"""
        data = request.get_json(silent=True)
        readings = data.get('readings') if isinstance(data, dict) else None
        result = engine.record_device_status(readings)
        return jsonify(result), _status_code(result)

    return app


if __name__ == '__main__':
    app = create_app()

    print("=== Coffee Kiosk Order Engine ===")
    print(f"Starting server on http://localhost:{settings.port}")
    print("Press Ctrl+C to stop")

    app.run(
        host='0.0.0.0',
        port=settings.port,
        debug=settings.debug
    )
