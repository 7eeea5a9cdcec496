#!/usr/bin/env python3
"""
Unified CLI for motorbike expense and maintenance tracking.

Commands:
  status       - Show maintenance reminders and the next service visit
  stats        - Show costs, fuel efficiency and the condition rating
  history      - View fuel and service history
  trip-check   - Maintenance advisory for a planned trip
  log-fuel     - Add a fuel stop
  log-service  - Add a service record
  remind       - Add a manual reminder
  update-odo   - Update the current odometer reading
"""

import argparse
import sys
import uuid
from datetime import date
from pathlib import Path
from tabulate import tabulate
from typing import List, Optional, Union

from motolog import (
    AdvisoryError,
    FuelLog,
    ManualReminder,
    Reminder,
    ReminderType,
    ServicePart,
    ServiceRecord,
    TankStatus,
    Trip,
    TripExpense,
    load_vehicle,
    save_current_odometer,
    save_fuel_log,
    save_manual_reminder,
    save_service_record,
    save_trip,
)
from motolog.calculations import parse_date
from motolog.config import Settings, configure_logging, get_trip_advisor

# =============================================================================
# Formatting helpers
# =============================================================================


def format_km(km: Optional[float]) -> str:
    """Format a distance for display."""
    return f"{km:,.0f}" if km is not None else "-"


def format_cost(cost: Optional[float]) -> str:
    """Format an amount in rupees for display."""
    return f"Rs. {cost:,.2f}" if cost is not None else "-"


def format_days(days: Optional[int]) -> str:
    """Format remaining days (e.g. 'due', '12d', or '-' when unknown)."""
    if days is None:
        return "-"
    if days <= 0:
        return "due"
    return f"{days}d"


def truncate(text: Optional[str], max_len: int = 30) -> str:
    """Truncate text with ellipsis if too long."""
    if text is None:
        return "-"
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


def new_id() -> str:
    return uuid.uuid4().hex[:12]


# =============================================================================
# Status command
# =============================================================================


def make_reminder_table(reminders: List[Reminder]) -> List[List[str]]:
    """Convert reminders to table rows."""
    rows = []
    for r in reminders:
        rows.append(
            [
                r.name,
                r.label,
                f"{r.progress:.0f}%",
                format_days(r.remaining_days),
                r.estimated_due_date.isoformat() if r.estimated_due_date else "-",
            ]
        )
    return rows


def cmd_status(args):
    """Show maintenance reminders and the next service visit."""
    vehicle = load_vehicle(args.vehicle_file)
    reminders = vehicle.active_reminders()
    next_service = vehicle.next_service()

    print(f"Bike: {vehicle.bike.display_name}")
    print(f"Odometer: {format_km(vehicle.current_odometer)} km (as of {vehicle.as_of_date})")
    print(f"Last service: {next_service.last_service_date or '-'}")
    print()

    if next_service.nothing_due:
        print("No maintenance reminders set. All good!")
        return 0

    due_date = next_service.next_service_date
    print(f"Next service: {due_date.isoformat() if due_date else 'unknown'}"
          f" ({format_days(next_service.days_to_next_service)})")
    print(f"  Tasks: {', '.join(next_service.tasks)}")
    print()

    due = [r for r in reminders if r.is_due]
    upcoming = [r for r in reminders if not r.is_due]
    upcoming.sort(key=lambda r: (r.remaining_days is None, r.remaining_days or 0))
    headers = ["Task", "Used / Interval", "Progress", "Remaining", "Due (est.)"]

    if due:
        print("DUE:")
        print(tabulate(make_reminder_table(due), headers=headers, tablefmt="simple"))
        print()

    if upcoming:
        print("UPCOMING:")
        print(tabulate(make_reminder_table(upcoming), headers=headers, tablefmt="simple"))
        print()

    return 0


# =============================================================================
# Stats command
# =============================================================================


def cmd_stats(args):
    """Show costs, fuel efficiency and the condition rating."""
    vehicle = load_vehicle(args.vehicle_file)
    stats = vehicle.stats()
    cpk = stats.cpk

    print(f"Bike: {vehicle.bike.display_name} [{vehicle.bike.engine_cc.value}cc]")
    print()
    rows = [
        ["Odometer", f"{format_km(stats.last_odometer)} km"],
        ["Daily average", f"{stats.daily_avg} km/day"],
        ["Fuel cost", format_cost(stats.total_fuel_cost)],
        ["Service cost", format_cost(stats.total_service_cost)],
        ["Total ownership", format_cost(stats.total_ownership)],
        ["Cost per km", format_cost(stats.cost_per_km)],
        ["Fuel logs", stats.total_fuel_logs],
        ["Fuel (liters)", f"{stats.total_fuel_liters:,.1f}"],
        ["Mileage (avg/last/best)",
         f"{stats.avg_mileage} / {stats.last_mileage} / {stats.best_mileage} km/l"],
        ["Efficiency", stats.efficiency_status],
        ["Services", stats.total_services],
        ["Oil changes", stats.total_oil_changes],
        ["Parts changed", stats.total_parts_changed],
    ]
    print(tabulate(rows, tablefmt="simple"))
    print()

    print(f"Condition: {cpk.condition.value}")
    if cpk.has_data:
        print(f"  CPK: {cpk.total_cpk:.2f} over {format_km(cpk.total_distance)} km")
        print(f"  Fuel: {cpk.fuel_cpk:.2f}/km ({cpk.fuel_cpk_percent}%)")
        print(f"  Service: {cpk.service_cpk:.2f}/km ({cpk.service_cpk_percent}%)")
    else:
        print("  Ride at least 500 km with a few logs to get a rating.")

    return 0


# =============================================================================
# History command
# =============================================================================


def make_history_table(entries: List[Union[FuelLog, ServiceRecord]]) -> List[List[str]]:
    """Convert fuel logs and service records to table rows."""
    rows = []
    for entry in entries:
        if isinstance(entry, ServiceRecord):
            kind, what, cost = "service", entry.title, entry.total_cost
        else:
            kind = "fuel"
            what = f"{entry.liters:g} L ({entry.tank_status.value})"
            cost = entry.amount
        rows.append(
            [entry.date, format_km(entry.odometer), kind, what, format_cost(cost),
             truncate(entry.notes)]
        )
    return rows


def cmd_history(args):
    """View fuel and service history."""
    vehicle = load_vehicle(args.vehicle_file)
    entries = vehicle.get_history_sorted(kind=args.kind, reverse=not args.asc)

    if args.since:
        entries = [e for e in entries if str(e.date) >= args.since]

    print(f"Bike: {vehicle.bike.display_name}")
    print(f"Showing: {len(entries)} entries")
    print()

    if not entries:
        print("No history entries found.")
        return 0

    headers = ["Date", "Odometer", "Type", "What", "Cost", "Notes"]
    print(tabulate(make_history_table(entries), headers=headers, tablefmt="simple"))
    return 0


# =============================================================================
# Trip check command
# =============================================================================


def cmd_trip_check(args):
    """Maintenance advisory for a planned trip."""
    vehicle = load_vehicle(args.vehicle_file)

    if args.trip_id:
        trip = vehicle.get_trip(args.trip_id)
        if trip is None:
            print(f"Error: Unknown trip id '{args.trip_id}'")
            return 1
    else:
        if not args.destination or args.distance is None:
            print("Error: give --trip-id or both --destination and --distance")
            return 1
        start = args.start or date.today().isoformat()
        try:
            parse_date(start)
        except ValueError:
            print(f"Error: Invalid start date '{start}' (expected YYYY-MM-DD)")
            return 1
        trip = Trip(new_id(), args.destination, start, args.distance)

    request = vehicle.advisory_request(trip)
    print(f"Trip: {request.destination} on {request.start_date.isoformat()}")
    print(f"Distance: {format_km(request.distance)} km over {request.duration_days} day(s)")
    print(f"Projected odometer at return: {format_km(request.projected_end_odometer)} km")
    print()

    if not request.maintenance_tasks:
        print("No interval-tracked maintenance to check.")
        return 0

    advisor = get_trip_advisor(Settings())
    try:
        advisories = advisor.advise(request)
    except AdvisoryError as e:
        print(f"Error: {e}")
        print("Could not get a maintenance advisory. Try again later.")
        return 1

    rows = [[a.task_name, a.status.value, a.message] for a in advisories]
    print(tabulate(rows, headers=["Task", "Status", "Advice"], tablefmt="simple",
                   maxcolwidths=[None, None, 60]))
    return 0


# =============================================================================
# Log commands
# =============================================================================


def add_to_active_trip(args, vehicle, item: str, cost: float) -> None:
    """Record a spend against the active trip, if there is one."""
    trip = vehicle.active_trip
    if trip is None or cost <= 0:
        return
    trip.expenses.insert(0, TripExpense(new_id(), item, cost))
    save_trip(args.vehicle_file, trip)
    print(f"Added to trip wallet: {trip.destination}")


def cmd_log_fuel(args):
    """Add a fuel stop."""
    vehicle = load_vehicle(args.vehicle_file)
    price = args.amount / args.liters if args.liters else 0
    log = FuelLog(
        new_id(),
        args.date or date.today().isoformat(),
        args.odometer,
        liters=args.liters,
        amount=args.amount,
        price_per_liter=round(price, 2),
        tank_status=TankStatus.PARTIAL if args.partial else TankStatus.FULL,
        estimated_mileage=args.estimated_mileage,
        station=args.station,
        notes=args.notes,
    )

    print(f"Adding fuel log to {args.vehicle_file}:")
    print(f"  Date:     {log.date}")
    print(f"  Odometer: {format_km(log.odometer)}")
    print(f"  Fuel:     {log.liters:g} L ({log.tank_status.value})")
    print(f"  Amount:   {format_cost(log.amount)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_fuel_log(args.vehicle_file, log)
    print("Fuel log saved.")
    add_to_active_trip(args, vehicle, f"Fuel ({log.liters:g}L)", log.amount)
    return 0


def parse_part(text: str) -> ServicePart:
    """
    Parse a part given on the command line.

    Format: NAME:COST[:QTY][:km=N|:days=N], e.g. "Engine Oil:850:1:km=3000".
    """
    fields = text.split(":")
    if len(fields) < 2:
        raise argparse.ArgumentTypeError(f"Invalid part '{text}' (expected NAME:COST)")

    name = fields[0].strip()
    try:
        unit_cost = float(fields[1])
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid cost in part '{text}'")

    quantity = 1.0
    reminder_type, reminder_value = ReminderType.NONE, None
    for field in fields[2:]:
        if "=" in field:
            kind, _, value = field.partition("=")
            try:
                reminder_type = ReminderType(kind.strip().lower())
                reminder_value = float(value)
            except ValueError:
                raise argparse.ArgumentTypeError(f"Invalid reminder in part '{text}'")
        else:
            try:
                quantity = float(field)
            except ValueError:
                raise argparse.ArgumentTypeError(f"Invalid quantity in part '{text}'")

    return ServicePart(name, unit_cost, quantity, reminder_type, reminder_value)


def cmd_log_service(args):
    """Add a service record."""
    vehicle = load_vehicle(args.vehicle_file)
    record = ServiceRecord(
        new_id(),
        args.date or date.today().isoformat(),
        args.odometer,
        args.title,
        labor_cost=args.labor,
        parts=args.part or [],
        service_type=args.type,
        notes=args.notes,
    )

    print(f"Adding service record to {args.vehicle_file}:")
    print(f"  Title:    {record.title}")
    print(f"  Date:     {record.date}")
    print(f"  Odometer: {format_km(record.odometer)}")
    for part in record.parts:
        reminder = ""
        if part.has_reminder:
            reminder = f" (remind every {part.reminder_value:g} {part.reminder_type.value})"
        print(f"  Part:     {part.name} x{part.quantity:g} {format_cost(part.line_cost)}{reminder}")
    print(f"  Labor:    {format_cost(record.labor_cost)}")
    print(f"  Total:    {format_cost(record.total_cost)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_service_record(args.vehicle_file, record)
    print("Service record saved.")
    add_to_active_trip(args, vehicle, f"Service: {record.title}", record.total_cost)
    return 0


def cmd_remind(args):
    """Add a manual reminder."""
    if not args.due_date and args.due_odo is None:
        print("Error: give --due-date, --due-odo, or both")
        return 1

    reminder = ManualReminder(
        new_id(), due_date=args.due_date, due_odometer=args.due_odo, notes=args.notes
    )

    print(f"Adding reminder to {args.vehicle_file}:")
    print(f"  Task:     {reminder.name}")
    if reminder.due_date:
        print(f"  Due date: {reminder.due_date}")
    if reminder.due_odometer is not None:
        print(f"  Due at:   {format_km(reminder.due_odometer)} km")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_manual_reminder(args.vehicle_file, reminder)
    print("Reminder saved.")
    return 0


def cmd_update_odo(args):
    """Update the current odometer reading."""
    vehicle = load_vehicle(args.vehicle_file)

    print(f"Bike: {vehicle.bike.display_name}")
    print(f"Current odometer: {format_km(vehicle.current_odometer)}")
    print(f"New odometer:     {format_km(args.odometer)}")
    print()

    if args.dry_run:
        print("(dry run - no changes made)")
        return 0

    save_current_odometer(args.vehicle_file, args.odometer)
    print("Odometer updated.")
    return 0


# =============================================================================
# Main
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Motorbike expense and maintenance tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s vehicles/pulsar.yaml status
  %(prog)s vehicles/pulsar.yaml stats
  %(prog)s vehicles/pulsar.yaml history --kind service
  %(prog)s vehicles/pulsar.yaml trip-check --destination Mustang --distance 450
  %(prog)s vehicles/pulsar.yaml log-fuel 12480 6.2 1050
  %(prog)s vehicles/pulsar.yaml log-service "General Service" 12500 --labor 500 \\
      --part "Engine Oil:850:1:km=3000" --part "Air Filter:400:1:days=180"
  %(prog)s vehicles/pulsar.yaml remind --notes "Renew insurance" --due-date 2026-12-01
  %(prog)s vehicles/pulsar.yaml update-odo 12600
""",
    )
    parser.add_argument("vehicle_file", type=Path, help="Path to vehicle YAML file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show maintenance reminders and the next service")
    subparsers.add_parser("stats", help="Show costs, fuel efficiency and condition rating")

    history_parser = subparsers.add_parser("history", help="View fuel and service history")
    history_parser.add_argument(
        "--kind", choices=["all", "fuel", "service"], default="all",
        help="Which records to show (default: all)",
    )
    history_parser.add_argument(
        "--since", type=str, help="Show only entries since date (YYYY-MM-DD)"
    )
    history_parser.add_argument(
        "--asc", action="store_true", help="Sort oldest first instead of newest first"
    )

    trip_parser = subparsers.add_parser(
        "trip-check", help="Maintenance advisory for a planned trip"
    )
    trip_parser.add_argument("--trip-id", type=str, help="Check a saved trip")
    trip_parser.add_argument("--destination", type=str, help="Where to")
    trip_parser.add_argument("--distance", type=float, help="Trip distance in km")
    trip_parser.add_argument(
        "--start", type=str, help="Start date YYYY-MM-DD (default: today)"
    )

    fuel_parser = subparsers.add_parser("log-fuel", help="Add a fuel stop")
    fuel_parser.add_argument("odometer", type=float, help="Odometer reading")
    fuel_parser.add_argument("liters", type=float, help="Liters filled")
    fuel_parser.add_argument("amount", type=float, help="Amount paid")
    fuel_parser.add_argument("--partial", action="store_true", help="Tank not filled up")
    fuel_parser.add_argument(
        "--estimated-mileage", type=float, help="Your own km/l estimate for partial fills"
    )
    fuel_parser.add_argument("--date", type=str, help="Date YYYY-MM-DD (default: today)")
    fuel_parser.add_argument("--station", type=str, help="Fuel station")
    fuel_parser.add_argument("--notes", type=str, help="Notes")
    fuel_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    service_parser = subparsers.add_parser("log-service", help="Add a service record")
    service_parser.add_argument("title", type=str, help="Work done (e.g. 'General Service')")
    service_parser.add_argument("odometer", type=float, help="Odometer reading")
    service_parser.add_argument("--labor", type=float, default=0, help="Labor cost")
    service_parser.add_argument(
        "--part", type=parse_part, action="append",
        help="NAME:COST[:QTY][:km=N|:days=N], repeatable",
    )
    service_parser.add_argument(
        "--type", choices=["regular", "repair", "emergency"], help="Service type"
    )
    service_parser.add_argument("--date", type=str, help="Date YYYY-MM-DD (default: today)")
    service_parser.add_argument("--notes", type=str, help="Notes")
    service_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    remind_parser = subparsers.add_parser("remind", help="Add a manual reminder")
    remind_parser.add_argument("--notes", type=str, help="What to do")
    remind_parser.add_argument("--due-date", type=str, help="Due date YYYY-MM-DD")
    remind_parser.add_argument("--due-odo", type=float, help="Due odometer reading")
    remind_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be added without saving"
    )

    odo_parser = subparsers.add_parser("update-odo", help="Update the odometer reading")
    odo_parser.add_argument("odometer", type=float, help="Current odometer")
    odo_parser.add_argument(
        "--dry-run", action="store_true", help="Show what would be updated without saving"
    )

    return parser


COMMANDS = {
    "status": cmd_status,
    "stats": cmd_stats,
    "history": cmd_history,
    "trip-check": cmd_trip_check,
    "log-fuel": cmd_log_fuel,
    "log-service": cmd_log_service,
    "remind": cmd_remind,
    "update-odo": cmd_update_odo,
}


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(Settings())

    if not args.vehicle_file.exists():
        print(f"Error: File not found: {args.vehicle_file}")
        return 1

    return COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main() or 0)
