#!/usr/bin/env python3
"""
DNS Records Manager - DNS record management for a register.it domain

Lists, creates, updates and deletes the records of one domain through the
register.it control panel and reports the outcome on the console.
"""

import logging
from typing import Dict, List, Optional

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Confirm
from rich.table import Table

from ..errors import LoginExhaustedError, RecordNotFoundError, RegisterItError
from ..providers.dns_client import DNSClient
from ..utils.validators import validate_record
from .models import DnsRecord, ExistingDnsRecord
from .record_manager import RecordManager

# Initialize rich console and logger
console = Console()
logger = logging.getLogger(__name__)


class DNSManager:
    """Main DNS management class that runs one operation per browser session."""

    def __init__(self, config: Dict, dns_client: Optional[DNSClient] = None):
        """Initialize the DNS manager with configuration."""
        self.config = config
        self.dns_client = dns_client or DNSClient(self.config)
        self.record_manager = RecordManager(self.dns_client)

    def list_records(self) -> bool:
        """Print every record of the domain."""
        try:
            with self._spinner("Fetching DNS records..."):
                records = self.dns_client.list_records()

            if not records:
                console.print("[yellow]No DNS records found[/yellow]")
                return True

            self._display_records(records)
            summary = self.record_manager.summarize(records)
            by_type = ", ".join(f"{count} {kind}" for kind, count in summary["by_type"].items())
            console.print(f"\n[bold]Total records: {summary['total_records']}[/bold] ({by_type})")
            return True

        except RegisterItError as e:
            return self._report_failure("list records", e)
        finally:
            self.dns_client.close()

    def create_record(self, record: DnsRecord) -> bool:
        """Append a record to the domain."""
        try:
            self._warn_invalid(record)
            with self._spinner(f"Creating {record.type} record {record.name}..."):
                created = self.dns_client.create_record(record)

            console.print("[green]DNS record created[/green]")
            self._display_records([created])
            logger.info(f"Created record: {created.name} {created.type} -> {created.value}")
            return True

        except RegisterItError as e:
            return self._report_failure("create record", e)
        finally:
            self.dns_client.close()

    def update_record(
        self,
        record_id,
        name: Optional[str] = None,
        ttl=None,
        record_type: Optional[str] = None,
        value: Optional[str] = None,
    ) -> bool:
        """Replace the record at `record_id`, keeping fields that were not given."""
        try:
            with self._spinner(f"Looking up DNS record {record_id}..."):
                record = self.record_manager.resolve_update(
                    record_id, name=name, ttl=ttl, record_type=record_type, value=value
                )

            self._warn_invalid(record)
            with self._spinner(f"Updating DNS record {record_id}..."):
                updated = self.dns_client.update_record(record_id, record)

            console.print("[green]DNS record updated[/green]")
            self._display_records([updated])
            logger.info(f"Updated record {record_id}: {updated.name} {updated.type} -> {updated.value}")
            return True

        except (RegisterItError, ValueError) as e:
            return self._report_failure("update record", e)
        finally:
            self.dns_client.close()

    def delete_record(self, record_id, confirm: bool = True) -> bool:
        """Remove the record at `record_id`, asking first unless `confirm` is False."""
        try:
            if confirm and not Confirm.ask(
                f"Are you sure you want to delete DNS record {record_id}?", console=console
            ):
                console.print("[yellow]Deletion cancelled[/yellow]")
                return False

            with self._spinner(f"Deleting DNS record {record_id}..."):
                self.dns_client.delete_record(record_id)

            console.print(f"[green]DNS record {record_id} deleted[/green]")
            logger.info(f"Deleted record: {record_id}")
            return True

        except RegisterItError as e:
            return self._report_failure("delete record", e)
        finally:
            self.dns_client.close()

    def _spinner(self, description: str) -> Progress:
        progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        )
        progress.add_task(description, total=None)
        return progress

    def _warn_invalid(self, record: DnsRecord) -> None:
        for warning in validate_record(record):
            console.print(f"[yellow]Warning: {warning}[/yellow]")

    def _display_records(self, records: List[ExistingDnsRecord]) -> None:
        """Display records as a table."""
        domain = getattr(self.dns_client.provider, "domain", "")
        table = Table(title=f"DNS Records - {domain}")
        table.add_column("ID", style="dim", justify="right")
        table.add_column("Name", style="cyan")
        table.add_column("TTL", style="dim", justify="right")
        table.add_column("Type", style="magenta")
        table.add_column("Value", style="white")

        for record in records:
            table.add_row(str(record.id), record.name, str(record.ttl), record.type, record.value)

        console.print(table)

    def _report_failure(self, operation: str, error: Exception) -> bool:
        if isinstance(error, LoginExhaustedError):
            hint = " - check the credentials or try again later"
        elif isinstance(error, RecordNotFoundError):
            hint = " - list the records again to get current ids"
        else:
            hint = ""
        logger.error(f"Failed to {operation}: {error}")
        console.print(f"[red]Failed to {operation}: {error}{hint}[/red]")
        return False
