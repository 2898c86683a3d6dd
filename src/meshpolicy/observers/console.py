# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/meshpolicy/observers/console.py

import typer

from .events import BaseEvent, PolicyRejected


class ConsoleObserver:
    def notify(self, event: BaseEvent) -> None:
        d = event.dict()
        k = event.__class__.__name__
        data = ", ".join(f"{x}={y}" for x, y in d.items() if x not in ("ts", "run_id", "source"))
        typer.echo(
            f"[{d['ts']}] {k} src={d['source']} {{{data}}}",
            err=isinstance(event, PolicyRejected),
        )
