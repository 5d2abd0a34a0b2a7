"""Command Line Interface for CareBill.

This module provides the interactive admission desk (``carebill menu``) and
informational commands, built with Typer and rendered with Rich. It is a
collaborator of the domain core: it collects raw field values, calls the
ledger, and renders whatever the ledger and observers report.
"""

from typing import Any, Dict, assert_never

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

from carebill.domain.adjustments import available_adjustments
from carebill.domain.enums import PatientCategory
from carebill.domain.ledger import AdmissionLedger, BillStatement
from carebill.domain.money import format_money
from carebill.domain.patient_record import EmergencyDetails, ICUDetails, PatientRecord, RegularDetails
from carebill.domain.ports import CareBillError, ValidationError
from carebill.domain.treatment_cost import describe_cost
from carebill.infrastructure.audit import EventAuditLogger
from carebill.infrastructure.settings import settings
from carebill.main import configure_logging, create_ledger

app = typer.Typer(
    name="carebill",
    help="CareBill: patient admission and billing desk",
    add_completion=False
)
console = Console()

MAIN_MENU = {
    "1": "Admit Patient",
    "2": "Bill Existing Patient",
    "3": "List Patients",
    "4": "Exit",
}

CATEGORY_MENU = {
    "1": PatientCategory.REGULAR,
    "2": PatientCategory.EMERGENCY,
    "3": PatientCategory.ICU,
}


def _print_notification(line: str) -> None:
    console.print(line, style="cyan", markup=False, highlight=False)


def _print_menu(title: str, options: Dict[str, str]) -> None:
    console.print(f"\n[bold]{title}[/bold]")
    for key, label in options.items():
        console.print(f"  {key}. {escape(label)}")


def _describe_details(record: PatientRecord) -> str:
    details = record.details
    if isinstance(details, RegularDetails):
        return details.ailment or "-"
    if isinstance(details, EmergencyDetails):
        return f"{details.emergency_type or 'Unspecified'} (severity {details.severity})"
    if isinstance(details, ICUDetails):
        ventilator = "ventilator" if details.ventilator_required else "no ventilator"
        return f"{details.days_in_icu} day(s), {ventilator}"
    return "-"


def _prompt_details(category: PatientCategory) -> Dict[str, Any]:
    if category is PatientCategory.REGULAR:
        return {
            "category": category.value,
            "ailment": Prompt.ask("Enter Ailment", default=""),
        }
    if category is PatientCategory.EMERGENCY:
        return {
            "category": category.value,
            "emergency_type": Prompt.ask("Enter Emergency Type", default=""),
            "severity": IntPrompt.ask("Enter Severity (1-5)"),
        }
    if category is PatientCategory.ICU:
        return {
            "category": category.value,
            "days_in_icu": IntPrompt.ask("Enter Days in ICU"),
            "ventilator_required": Confirm.ask("Ventilator required?", default=False),
        }
    assert_never(category)


def _render_statement(ledger: AdmissionLedger, record: PatientRecord, statement: BillStatement) -> None:
    table = Table(show_header=False, box=None, padding=(0, 2))
    for line in describe_cost(record, ledger.tariff):
        table.add_row(escape(line.label), format_money(line.amount))
    table.add_row("[bold]Treatment Cost[/bold]", f"[bold]{format_money(statement.base_amount)}[/bold]")
    if statement.note is not None:
        table.add_row(escape(statement.note.label), f"-{format_money(statement.note.amount)}")
    table.add_row("[bold]Final Bill[/bold]", f"[bold green]{format_money(statement.final_amount)}[/bold green]")
    console.print(Panel(table, title=f"Bill for {escape(record.name)} (id {record.patient_id})", expand=False))


def _choose_and_bill(ledger: AdmissionLedger, record: PatientRecord) -> None:
    adjustments = {str(i): adjustment for i, adjustment in enumerate(available_adjustments(), start=1)}
    _print_menu("Select Billing Adjustment:", {key: a.display_name for key, a in adjustments.items()})
    choice = Prompt.ask("Choice", choices=list(adjustments), default="1")

    statement = ledger.generate_bill(record.patient_id, adjustments[choice])
    _render_statement(ledger, record, statement)


def _admit_interactively(ledger: AdmissionLedger) -> None:
    name = Prompt.ask("\nEnter Name")
    age = IntPrompt.ask("Enter Age")

    _print_menu("Select Patient Type:", {key: c.value for key, c in CATEGORY_MENU.items()})
    category = CATEGORY_MENU[Prompt.ask("Choice", choices=list(CATEGORY_MENU))]

    description = {"name": name, "age": age, "details": _prompt_details(category)}
    try:
        record = ledger.admit(description)
    except ValidationError as e:
        console.print("[red]✗[/red] Admission rejected:")
        for detail in e.details:
            console.print(f"  • {escape(detail['field'] or 'input')}: {escape(detail['message'])}")
        return

    console.print(f"[green]✓[/green] Admitted {escape(record.name)} as patient {record.patient_id}")
    _choose_and_bill(ledger, record)


def _bill_existing(ledger: AdmissionLedger) -> None:
    if not len(ledger):
        console.print("[yellow]⚠[/yellow] No patients admitted yet")
        return
    patient_id = IntPrompt.ask("Enter Patient ID")
    try:
        record = ledger.get(patient_id)
    except CareBillError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        return
    _choose_and_bill(ledger, record)


def _list_patients(ledger: AdmissionLedger) -> None:
    records = ledger.list_all()
    if not records:
        console.print("[yellow]⚠[/yellow] No patients admitted yet")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Age", justify="right")
    table.add_column("Category")
    table.add_column("Details")
    table.add_column("Admitted")
    for record in records:
        table.add_row(
            str(record.patient_id),
            escape(record.name),
            str(record.age),
            record.category.value,
            escape(_describe_details(record)),
            record.admitted_at.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@app.command()
def menu(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Run the interactive admission and billing desk.

    Examples:
        carebill menu
        carebill menu --verbose
    """
    configure_logging(settings, verbose=verbose)
    audit_logger = EventAuditLogger()
    ledger = create_ledger(sink=_print_notification, audit_logger=audit_logger)

    console.print(f"\n[bold blue]{escape(settings.app_name)} - Hospital Patient Management[/bold blue]")

    handlers = {
        "1": _admit_interactively,
        "2": _bill_existing,
        "3": _list_patients,
    }
    try:
        while True:
            _print_menu("Main Menu", MAIN_MENU)
            choice = Prompt.ask("Choice", choices=list(MAIN_MENU))
            if choice == "4":
                break
            handlers[choice](ledger)
    except (KeyboardInterrupt, EOFError):
        console.print("\n[yellow]⚠[/yellow] Session interrupted")

    console.print(
        f"\n{len(ledger)} patient(s) admitted, {audit_logger.get_log_count()} event(s) recorded. Thank you!"
    )


@app.command()
def tariff() -> None:
    """Display the configured treatment tariff."""
    current = settings.tariff

    table = Table(title="Treatment Tariff", show_header=True, header_style="bold")
    table.add_column("Category", style="cyan")
    table.add_column("Charge")
    table.add_column("Amount", justify="right")
    table.add_row("Regular", "Flat fee", format_money(current.regular_fee))
    table.add_row("Emergency", "Base fee", format_money(current.emergency_base_fee))
    table.add_row("Emergency", "Per severity point", format_money(current.per_severity_unit))
    table.add_row("ICU", "Per day", format_money(current.icu_daily_rate))
    table.add_row("ICU", "Ventilator per day", format_money(current.ventilator_daily_rate))
    console.print(table)

    adjustments = Table(title="Billing Adjustments", show_header=True, header_style="bold")
    adjustments.add_column("Name", style="cyan")
    adjustments.add_column("Description")
    for adjustment in available_adjustments():
        adjustments.add_row(adjustment.name, escape(adjustment.display_name))
    console.print(adjustments)


@app.command()
def info() -> None:
    """Display application information and configuration."""
    console.print("[bold blue]System Information[/bold blue]\n")

    info_table = Table(show_header=False, box=None, padding=(0, 2))
    info_table.add_row("Application:", escape(settings.app_name))
    info_table.add_row("Version:", settings.app_version)
    info_table.add_row("Log Level:", settings.log_level)
    info_table.add_row("JSON Logs:", "Enabled" if settings.log_json else "Disabled")
    info_table.add_row(
        "Observer Failures:",
        "Isolated (logged)" if settings.isolate_observer_failures else "Propagated",
    )
    if settings.config_file:
        info_table.add_row("Config File:", escape(settings.config_file))
    console.print(info_table)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version information"),
) -> None:
    """CareBill: patient admission and billing desk."""
    if version:
        console.print(f"{settings.app_name} v{settings.app_version}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


if __name__ == "__main__":
    app()
