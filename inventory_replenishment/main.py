import argparse
import json
import sys

import numpy as np
from tabulate import tabulate

from inventory_replenishment.db import db, session_scope
from inventory_replenishment.logging_setup import logger, get_logger, log_exception
from inventory_replenishment.exceptions import ReplenishmentError

def init_application(connection_string=None):
    """Initialize application components."""
    db.initialize(connection_string)

    log = logger.app_logger
    log.info("Inventory Replenishment system initialized")
    log.info(f"Using database: {db.engine.url.render_as_string(hide_password=True)}")

    return True

def setup_database(drop_existing=False):
    """Create the database schema, optionally dropping it first."""
    log = get_logger('setup')

    if drop_existing:
        log.info("Dropping existing tables")
        db.drop_all_tables()

    db.create_all_tables()
    log.info("Database tables created")

def _print_json(payload):
    print(json.dumps(payload, indent=2, default=str))

def _print_fields(payload):
    print(tabulate([[key, value] for key, value in payload.items()], headers=['Metric', 'Value']))

def generate_forecast(args):
    """Generate or fetch the demand forecast for a product.

    Args:
        args: Command-line arguments with forecast parameters
    """
    from inventory_replenishment.services.forecast_service import ForecastService

    log = get_logger('forecast')
    log.info(f"Starting forecast for product {args.product_id}")

    rng = np.random.default_rng(args.seed) if args.seed is not None else None

    with session_scope() as session:
        forecast_service = ForecastService(session, rng=rng)

        if args.refresh:
            deleted = forecast_service.clear_product_forecast(args.product_id)
            log.info(f"Cleared {deleted} stored forecast rows for product {args.product_id}")

        forecast = forecast_service.get_or_create_forecast(args.product_id, args.days)

    if args.table:
        print(f"\nForecast for product {args.product_id}:")
        print(tabulate(
            [[point['date'], point['demand']] for point in forecast],
            headers=['Date', 'Demand']
        ))
    else:
        _print_json(forecast)
    return forecast

def run_auto_replenish(args):
    """Create purchase orders for all low stock products."""
    from inventory_replenishment.services.replenishment_service import ReplenishmentService

    log_info = logger.batch_start_log('auto_replenish', {'user_id': args.user_id})

    try:
        with session_scope() as session:
            results = ReplenishmentService(session).auto_replenish(user_id=args.user_id)
    except ReplenishmentError:
        logger.batch_end_log(log_info, success=False)
        raise

    logger.batch_end_log(log_info, success=True, result_info=results['message'])
    if args.table:
        print(results['message'])
        if results['orders']:
            print(tabulate(
                [[o['order_id'], o['order_number'], o['supplier_name'], o['total_items'], o['total_value']]
                 for o in results['orders']],
                headers=['Order ID', 'Order Number', 'Supplier', 'Items', 'Total Value']
            ))
    else:
        _print_json(results)
    return results

def check_reorder(args):
    """Evaluate whether a product should be reordered."""
    from inventory_replenishment.services.replenishment_service import ReplenishmentService

    with session_scope() as session:
        decision = ReplenishmentService(session).evaluate_product_reorder(
            args.product_id, safety_stock=args.safety_stock
        )

    if args.table:
        _print_fields(decision)
    else:
        _print_json(decision)
    return decision

def show_summary(args):
    """Print the inventory summary."""
    from inventory_replenishment.services.replenishment_service import ReplenishmentService

    with session_scope() as session:
        summary = ReplenishmentService(session).get_inventory_summary()

    if args.table:
        _print_fields(summary)
    else:
        _print_json(summary)
    return summary

def build_parser():
    parser = argparse.ArgumentParser(description='Inventory Replenishment System')

    parser.add_argument('--db-url', type=str, default=None,
                      help='Database URL (overrides configuration)')
    parser.add_argument('--setup-db', action='store_true',
                      help='Set up the database schema')
    parser.add_argument('--drop-db', action='store_true',
                      help='Drop existing tables before setup')
    parser.add_argument('--table', action='store_true',
                      help='Print results as tables instead of JSON')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    forecast_parser = subparsers.add_parser('forecast', help='Generate a product demand forecast')
    forecast_parser.add_argument('--product-id', type=int, required=True, help='Product to forecast')
    forecast_parser.add_argument('--days', type=int, default=None,
                               help='Number of days to forecast')
    forecast_parser.add_argument('--seed', type=int, default=None,
                               help='Random seed for reproducible forecasts')
    forecast_parser.add_argument('--refresh', action='store_true',
                               help='Discard the stored forecast and generate a new one')

    replenish_parser = subparsers.add_parser('auto-replenish', help='Create purchase orders for low stock products')
    replenish_parser.add_argument('--user-id', type=int, default=None,
                                help='User the orders are attributed to')

    reorder_parser = subparsers.add_parser('reorder-check', help='Evaluate reordering for a product')
    reorder_parser.add_argument('--product-id', type=int, required=True, help='Product to evaluate')
    reorder_parser.add_argument('--safety-stock', type=float, default=0.0, help='Safety stock units')

    subparsers.add_parser('summary', help='Show inventory summary')

    return parser

COMMANDS = {
    'forecast': generate_forecast,
    'auto-replenish': run_auto_replenish,
    'reorder-check': check_reorder,
    'summary': show_summary
}

def main(argv=None):
    """Main application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    init_application(args.db_url)

    if args.setup_db:
        setup_database(args.drop_db)
        if not args.command:
            return 0

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 0

    try:
        handler(args)
    except ReplenishmentError as e:
        log_exception('app', e, f"Command {args.command} failed")
        return 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
