"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterable

import questionary
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from orchcli.cli.common.tui_style import QUESTIONARY_STYLE_CONFIRM

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
    }
)

console = Console(theme=_THEME)


def _yes_no(value: bool | None) -> str:
    if value is None:
        return ""
    return "yes" if value else "no"


@dataclass(frozen=True)
class Out:
    """Output formatter for CLI messages and tables."""

    def _q_try(self, fn, *args, **kwargs):
        """Call questionary prompts and drop unsupported kwargs on older versions."""
        try:
            return fn(*args, **kwargs)
        except TypeError:
            for k in ("pointer", "auto_enter"):
                kwargs.pop(k, None)
            return fn(*args, **kwargs)

    def _q(self, message: str) -> str:
        """Prefix Questionary prompts to be ORCH-CLI consistent."""
        return f"[ORCH-CLI] {message}"

    def info(self, msg: str) -> None:
        """Print an info message."""
        console.print(f"[title]›[/] {msg}")

    @contextmanager
    def status(self, msg: str):
        """Show a transient status spinner while work is in progress."""
        with console.status(msg, spinner="dots"):
            yield

    def success(self, msg: str) -> None:
        """Print a success message."""
        console.print(f"[ok]✓[/] {msg}")

    def warn(self, msg: str) -> None:
        """Print a warning message."""
        console.print(f"[warn]⚠[/] {msg}")

    def error(self, msg: str) -> None:
        """Print an error message."""
        console.print(f"[err]✗[/] {msg}")

    def plain(self, msg: str) -> None:
        """Print text verbatim (no Rich markup interpretation)."""
        console.print(msg, markup=False, highlight=False)

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """
        Ask the user for confirmation using a standardized Questionary prompt.

        Args:
            message: Confirmation question shown to the user.
            default: Default answer if the user just presses enter.

        Returns:
            True if the user confirms, False otherwise.
        """
        # Questionary renders `instruction=...` inline next to the echoed answer.
        console.print("[meta]Use y/n then Enter[/]")

        prompt = self._q_try(
            questionary.confirm,
            self._q(message),
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark="✦",
            auto_enter=False,
            pointer="❯",
        )
        return bool(prompt.ask())

    def packages_table(
        self, packages: Iterable[Any], title: str = "Deployment packages"
    ) -> None:
        """
        Expects objects with .name .version .is_deployed .application_references
        (like orchcli.core.catalog_models.DeploymentPackage)
        """
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok", no_wrap=True)
        t.add_column("Version", no_wrap=True)
        t.add_column("Deployed")
        t.add_column("Applications", style="meta")
        t.add_column("Default profile", style="meta")

        for p in packages:
            refs = ", ".join(
                f"{r.name}:{r.version}" for r in (p.application_references or ())
            )
            t.add_row(
                p.name,
                p.version,
                _yes_no(p.is_deployed),
                refs,
                p.default_profile_name or "",
            )

        console.print(t)

    def applications_table(
        self, applications: Iterable[Any], title: str = "Applications"
    ) -> None:
        """Render applications with their registries and profile counts."""
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok", no_wrap=True)
        t.add_column("Version", no_wrap=True)
        t.add_column("Helm registry", style="meta")
        t.add_column("Image registry", style="meta")
        t.add_column("Profiles")
        t.add_column("Default profile", style="meta")

        for a in applications:
            t.add_row(
                a.name,
                a.version,
                a.helm_registry_name or "",
                a.image_registry_name or "",
                str(len(a.profiles or ())),
                a.default_profile_name or "",
            )

        console.print(t)

    def artifacts_table(self, artifacts: Iterable[Any], title: str = "Artifacts") -> None:
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok")
        t.add_column("MIME type", style="meta")
        t.add_column("Description", style="meta")

        for a in artifacts:
            t.add_row(a.name, a.mime_type or "", a.description or "")

        console.print(t)

    def registries_table(self, registries: Iterable[Any], title: str = "Registries") -> None:
        t = Table(title=title, show_lines=False)
        t.add_column("Name", style="ok")
        t.add_column("Type", style="meta")
        t.add_column("Root URL", style="meta")

        for r in registries:
            t.add_row(r.name, r.type or "", r.root_url or "")

        console.print(t)


out = Out()
