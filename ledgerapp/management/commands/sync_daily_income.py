# ledgerapp/management/commands/sync_daily_income.py

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from ledgerapp.accrual.engine import run_accrual
from ledgerapp.accrual.runner import sync_all_users_income, users_with_active_orders
from ledgerapp.accrual.targets import TARGETS

POOLS = {pool: (target,) for pool, target in TARGETS.items()}
POOLS["both"] = tuple(TARGETS.values())


class Command(BaseCommand):
    help = "Credit today's daily income (regular and/or weekend pools) for one or more users"

    def add_arguments(self, parser):
        parser.add_argument("--user", action="append", dest="users", default=[],
                            help="User id to sync (repeatable)")
        parser.add_argument("--all", action="store_true",
                            help="Sync every user with an active order")
        parser.add_argument("--pool", choices=sorted(POOLS), default="both")
        parser.add_argument("--at", type=str,
                            help="ISO timestamp to use as 'now' (default: current time)")
        parser.add_argument("--batch", action="store_true",
                            help="Run the locked nightly batch instead (implies --all --pool both)")

    def handle(self, *args, **options):
        now = timezone.now()
        if options["at"]:
            now = parse_datetime(options["at"])
            if now is None:
                raise CommandError("Invalid --at value. Use an ISO timestamp")
            if timezone.is_naive(now):
                now = timezone.make_aware(now)

        if options["batch"]:
            processed = sync_all_users_income(now=now)
            if processed is None:
                self.stdout.write(self.style.WARNING("⛔ Batch skipped: lock held or already finished"))
            else:
                self.stdout.write(self.style.SUCCESS(f"✅ Batch synced {processed} users"))
            return

        user_ids = list(options["users"])
        if options["all"]:
            user_ids = users_with_active_orders()
        if not user_ids:
            raise CommandError("Pass --user <id> or --all")

        self.stdout.write(f"▶ Syncing {options['pool']} income for {len(user_ids)} users at "
                          f"{timezone.localtime(now):%Y-%m-%d %H:%M}")

        committed = 0
        for user_id in user_ids:
            for target in POOLS[options["pool"]]:
                try:
                    plan = run_accrual(user_id, now=now, target=target)
                except Exception as e:
                    self.stdout.write(self.style.ERROR(f"❌ {target.pool} sync failed for {user_id}: {e}"))
                    continue

                if plan is None:
                    self.stdout.write(f"{user_id} [{target.pool}] nothing due")
                    continue
                committed += 1
                self.stdout.write(self.style.SUCCESS(
                    f"{user_id} [{target.pool}] → orders={len(plan.payouts)} payout={plan.total_payout}"
                ))

        self.stdout.write(self.style.SUCCESS(f"✅ Income sync completed: {committed} payout pass(es)"))
