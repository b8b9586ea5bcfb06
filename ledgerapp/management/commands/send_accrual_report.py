# ledgerapp/management/commands/send_accrual_report.py

from decimal import Decimal
from io import BytesIO

import openpyxl
from django.conf import settings
from django.core.mail import EmailMessage
from django.core.management.base import BaseCommand, CommandError
from django.db.models import Count, Sum
from django.utils import timezone
from django.utils.dateparse import parse_date

from ledgerapp.models import AccrualRun, POOL_CHOICES

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def build_report_workbook(report_date):
    """Summary per pool plus one row per committed pass for report_date."""
    runs = AccrualRun.objects.filter(ran_at__date=report_date).select_related("user")

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Summary"
    ws.append(["Date", "Pool", "Users Paid", "Orders Paid", "Total Payout"])

    totals = {
        row["pool"]: row
        for row in runs.values("pool").annotate(
            users=Count("user", distinct=True),
            orders=Sum("orders_paid"),
            payout=Sum("payout"),
        )
    }
    for pool, _label in POOL_CHOICES:
        row = totals.get(pool, {})
        ws.append([
            report_date,
            pool,
            row.get("users", 0),
            row.get("orders") or 0,
            row.get("payout") or Decimal("0.00"),
        ])

    detail = wb.create_sheet("Runs")
    detail.append(["Ran At", "Pool", "User", "Orders Paid", "Payout", "Active Daily Income"])
    for run in runs.order_by("ran_at"):
        detail.append([
            timezone.localtime(run.ran_at).replace(tzinfo=None),
            run.pool,
            run.user.get_username(),
            run.orders_paid,
            run.payout,
            run.active_daily_income,
        ])

    return wb


class Command(BaseCommand):
    help = "Build the daily income accrual report and mail it to admins with an Excel attachment"

    def add_arguments(self, parser):
        parser.add_argument("--date", type=str, help="Report date YYYY-MM-DD (default: today)")
        parser.add_argument("--to", action="append", dest="recipients", default=[],
                            help="Recipient address (repeatable)")

    def handle(self, *args, **options):
        report_date = timezone.localdate()
        if options["date"]:
            report_date = parse_date(options["date"])
            if report_date is None:
                raise CommandError("Invalid date format. Use YYYY-MM-DD")

        recipients = options["recipients"] or settings.LEDGER_REPORT_RECIPIENTS
        if not recipients:
            raise CommandError("No recipients: pass --to or set LEDGER_REPORT_RECIPIENTS")

        wb = build_report_workbook(report_date)
        output = BytesIO()
        wb.save(output)
        output.seek(0)

        email = EmailMessage(
            subject=f"VPharm Daily Income Report - {report_date}",
            body="Please find attached the daily income accrual report.",
            from_email=settings.DEFAULT_FROM_EMAIL,
            to=recipients,
        )
        email.attach(f"daily_income_{report_date}.xlsx", output.read(), XLSX_MIME)
        email.send()

        self.stdout.write(self.style.SUCCESS("✅ Daily income report generated and mailed with Excel attachment"))
