#!/usr/bin/env python3
"""
Seating Tool

Runs the automatic seating against Kvrocks and the operator actions around it.

Usage:
    # Seat every guest in the roster (asks the operator on blocked-seat conflicts)
    PYTHONPATH=. uv run python script/auto_assign.py run

    # Same, but save the summary to reports/
    PYTHONPATH=. uv run python script/auto_assign.py run --save

    # Empty all day matrices and totals
    PYTHONPATH=. uv run python script/auto_assign.py reset

    # Blocked seats (1-based row and seat)
    PYTHONPATH=. uv run python script/auto_assign.py block woensdag 5 12 "camera"
    PYTHONPATH=. uv run python script/auto_assign.py unblock woensdag 5 12
    PYTHONPATH=. uv run python script/auto_assign.py unblock-all
    PYTHONPATH=. uv run python script/auto_assign.py blocked [day]

    # Remove one guest from every day
    PYTHONPATH=. uv run python script/auto_assign.py remove 42
"""

import asyncio
from datetime import datetime
import sys

from rich.console import Console
from rich.table import Table

from src.platform.config.di import container
from src.platform.constant.path import REPORT_DIR
from src.platform.exception.exceptions import CustomBaseError
from src.platform.state.kvrocks_client import kvrocks_client
from src.service.seating.app.dto.auto_assign_dto import AutoAssignResult
from src.service.seating.domain.enum.day import Day


console = Console(record=True)


def _parse_day(value: str) -> Day:
    day = Day.parse(value)
    if day is None:
        console.print(f'❌ Unknown day: {value} (use {", ".join(Day)})', style='red')
        sys.exit(1)
    return day


def print_summary(result: AutoAssignResult) -> None:
    table = Table(title='Seating per day', show_header=True, header_style='bold magenta')
    table.add_column('Day', style='cyan', no_wrap=True)
    table.add_column('Assigned', justify='right', style='yellow')
    table.add_column('Capacity', justify='right', style='green')
    table.add_column('Occupancy', justify='right')

    for totals in result.day_totals:
        occupancy = totals.assigned / totals.capacity * 100 if totals.capacity else 0
        table.add_row(str(totals.day), str(totals.assigned), str(totals.capacity), f'{occupancy:.1f}%')

    console.print(table)
    console.print(
        f'\n✅ {result.placed_count} placed, {result.unplaced_count} unplaced, '
        f'{result.preference_count} preference pair(s)',
        style='bold green' if not result.unplaced else 'bold yellow',
    )

    if result.unplaced:
        unplaced = Table(title='Unplaced guests', show_header=True, header_style='bold red')
        unplaced.add_column('ID', justify='right', style='cyan')
        unplaced.add_column('Name')
        unplaced.add_column('Reason', style='yellow')
        for guest in result.unplaced:
            unplaced.add_row(str(guest.guest_id), guest.name, guest.reason)
        console.print(unplaced)


async def run(*, save: bool) -> None:
    guests = await container.seating_store().get_guests()
    console.print(f'🎭 Seating {len(guests)} guests...', style='bold cyan')

    result = await container.auto_assign_seating_use_case().auto_assign_seating(guests=guests)
    print_summary(result)

    if save:
        REPORT_DIR.mkdir(parents=True, exist_ok=True)
        path = REPORT_DIR / f'seating_{datetime.now():%Y%m%d_%H%M%S}.txt'
        console.save_text(str(path))
        console.print(f'💾 Report saved to {path}', style='green')


async def show_blocked(day: Day | None) -> None:
    blocked_seats = await container.list_blocked_seats_use_case().list_blocked_seats(day=day)
    if not blocked_seats:
        console.print('No blocked seats', style='green')
        return

    table = Table(title='Blocked seats', show_header=True, header_style='bold magenta')
    table.add_column('Day', style='cyan')
    table.add_column('Row', justify='right')
    table.add_column('Seat', justify='right')
    table.add_column('Reason', style='yellow')
    for seat in blocked_seats:
        table.add_row(str(seat.day), str(seat.row), str(seat.seat_number), seat.reason or '')
    console.print(table)


async def main() -> None:
    if len(sys.argv) < 2:
        console.print(__doc__)
        sys.exit(1)

    command = sys.argv[1]
    args = sys.argv[2:]

    try:
        await kvrocks_client.initialize()

        if command == 'run':
            await run(save='--save' in args)

        elif command == 'reset':
            await container.reset_seating_use_case().reset_seating()
            console.print('🧹 Seating reset', style='green')

        elif command == 'block':
            if len(args) < 3:
                console.print('❌ Usage: auto_assign.py block <day> <row> <seat> [reason]', style='red')
                sys.exit(1)
            await container.manage_blocked_seats_use_case().block_seat(
                day=_parse_day(args[0]),
                row=int(args[1]),
                seat_number=int(args[2]),
                reason=args[3] if len(args) > 3 else None,
            )
            console.print('⛔ Seat blocked', style='green')

        elif command == 'unblock':
            if len(args) < 3:
                console.print('❌ Usage: auto_assign.py unblock <day> <row> <seat>', style='red')
                sys.exit(1)
            await container.manage_blocked_seats_use_case().unblock_seat(
                day=_parse_day(args[0]), row=int(args[1]), seat_number=int(args[2])
            )
            console.print('✅ Seat released', style='green')

        elif command == 'unblock-all':
            await container.manage_blocked_seats_use_case().unblock_all_seats()
            console.print('✅ All seats released', style='green')

        elif command == 'blocked':
            await show_blocked(_parse_day(args[0]) if args else None)

        elif command == 'remove':
            if not args:
                console.print('❌ Usage: auto_assign.py remove <guest_id>', style='red')
                sys.exit(1)
            days = await container.remove_guest_from_seating_use_case().remove_guest_from_seating(
                guest_id=int(args[0])
            )
            console.print(f'🗑️ Removed from {", ".join(days)}', style='green')

        else:
            console.print(f'❌ Unknown command: {command}', style='red')
            sys.exit(1)

    except CustomBaseError as e:
        console.print(f'\n❌ {e.message}', style='red')
        solution = getattr(e, 'solution', None)
        if solution:
            console.print(f'💡 {solution}', style='yellow')
        sys.exit(1)

    finally:
        await kvrocks_client.disconnect()


if __name__ == '__main__':
    asyncio.run(main())
