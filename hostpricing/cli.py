import argparse
import logging
import sys

from hostpricing.db import SessionLocal
from hostpricing.logging_config import configure_logging
from hostpricing.services.pricing.applier import BulkPricingApplier
from hostpricing.services.pricing.config_store import BulkPricingConfigStore
from hostpricing.services.pricing.exceptions import BulkPricingError
from hostpricing.services.pricing.simulator import PricingSimulator
from hostpricing.services.pricing.tiers import seed_default_tiers

logger = logging.getLogger("hostpricing.cli")


def _resolve_config(store: BulkPricingConfigStore, name: str | None) -> dict:
    if name:
        return store.get_config_by_name(name).to_simulation_input()
    return store.get_default_config()


def run_simulate_command(session, args) -> None:
    """시뮬레이션 결과를 표 형태로 출력"""
    values = _resolve_config(BulkPricingConfigStore(session), args.config)
    result = PricingSimulator(session).run(**values)

    for plan_type, rows in result.simulation.items():
        print(f"[{plan_type}]")
        for row in rows:
            margin = f"{row['profit_margin']:.2f}%"
            print(
                f"  #{row['plan_id']:<4} {row['storage_gb']:>8.2f}GB "
                f"disc={row['discount_percentage']:>5.2f}% "
                f"price={row['new_total_price']:>14,.2f} "
                f"diff={row['price_difference']:>+14,.2f} "
                f"profit={row['profit']:>14,.2f} margin={margin}"
            )
    for skipped in result.skipped_plans:
        print(f"  (skipped) #{skipped['plan_id']} {skipped['plan_name']}: {skipped['reason']}")


def run_apply_command(session, args) -> None:
    values = _resolve_config(BulkPricingConfigStore(session), args.config)
    result = BulkPricingApplier(session).apply(plan_ids=args.plan_ids, **values)
    logger.info(
        f"[CLI] Applied: updated={result['updated_plan_ids']} skipped={result['skipped_plan_ids']} "
        f"tiers={result['tier_count']}"
    )


def run_seed_tiers_command(session, args) -> None:
    created = seed_default_tiers(session)
    session.commit()
    if created:
        logger.info(f"[CLI] Created {created} default tiers")
    else:
        logger.info("[CLI] Pricing tiers already exist, nothing to do")


def run_configs_command(session, args) -> None:
    for config in BulkPricingConfigStore(session).list_configs(active_only=not args.all):
        flag = "*" if config.is_default else " "
        print(
            f"{flag} {config.id:<4} {config.name:<30} base={config.base_price_per_gb:,.2f} "
            f"cost={config.cost_per_gb:,.2f} tiers={len(config.tier_discounts or [])}"
        )


COMMANDS = {
    "simulate": run_simulate_command,
    "apply": run_apply_command,
    "seed-tiers": run_seed_tiers_command,
    "configs": run_configs_command,
}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Hosting bulk pricing CLI")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    simulate_parser = subparsers.add_parser("simulate", help="Print a pricing simulation")
    simulate_parser.add_argument("--config", help="Saved config name (default config if omitted)")

    apply_parser = subparsers.add_parser("apply", help="Apply a saved config to hosting plans")
    apply_parser.add_argument("--config", help="Saved config name (default config if omitted)")
    apply_parser.add_argument("--plan-ids", type=int, nargs="+", required=True)

    subparsers.add_parser("seed-tiers", help="Create default pricing tiers when none exist")

    configs_parser = subparsers.add_parser("configs", help="List saved configs")
    configs_parser.add_argument("--all", action="store_true", help="Include inactive configs")

    args = parser.parse_args(argv)
    configure_logging(args.log_level.upper() if args.log_level else None)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    session = SessionLocal()
    try:
        handler(session, args)
        return 0
    except BulkPricingError as e:
        logger.error(f"[CLI] {e.error_code}: {e.message}")
        return 1
    except Exception as e:
        logger.exception(f"[CLI] Critical error: {e}")
        return 1
    finally:
        session.close()


if __name__ == "__main__":
    sys.exit(main())
