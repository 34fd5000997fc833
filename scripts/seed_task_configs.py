#!/usr/bin/env python3
"""
Store the built-in AI task defaults as editable task configurations.

Each known task gets a config named "<task> (default)" holding the default
model, sampling parameters, system instruction and safety settings. Existing
names are skipped, so the script can be re-run safely.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Tuple

import click
from rich.console import Console
from rich.table import Table

# Add the backend directory to the Python path
sys.path.append(str(Path(__file__).parent.parent / "backend"))

from resume_builder.core.database import db_manager
from resume_builder.core.exceptions import DuplicateError
from resume_builder.core.logging import setup_logging
from resume_builder.models.task_config import TaskConfigType
from resume_builder.schemas.task_config import GenerationConfig, SafetySetting, TaskConfigCreate
from resume_builder.services.ai.defaults import CHATBOT, GENERAL, default_registry
from resume_builder.services.task_config_service import TaskConfigService

logger = logging.getLogger(__name__)
console = Console()

_CHAT_TASKS = {CHATBOT, GENERAL}


def default_config_payload(task_name: str, activate: bool) -> TaskConfigCreate:
    default = default_registry.get(task_name)
    generation = {
        key: value
        for key, value in default.generation_config.items()
        if key not in ("responseSchema", "responseMimeType")
    }
    return TaskConfigCreate(
        name=f"{task_name} (default)",
        description=f"Built-in defaults for {task_name}",
        task_name=task_name,
        model_name=default.model_name,
        system_instruction=default.system_instruction,
        generation_config=GenerationConfig.model_validate(generation),
        safety_settings=[SafetySetting.model_validate(dict(s)) for s in default.safety_settings],
        type=TaskConfigType.CHATBOT if task_name in _CHAT_TASKS else TaskConfigType.TOOL,
        is_active=activate,
    )


async def seed(activate: bool) -> List[Tuple[str, str, str]]:
    """Store one config per known task; returns (task, model, outcome) rows."""
    await db_manager.initialize()
    await db_manager.create_all_tables()
    rows = []
    try:
        for task_name in default_registry.task_names():
            payload = default_config_payload(task_name, activate)
            async with db_manager.sessionmaker() as session:
                try:
                    await TaskConfigService(session).create(payload)
                    outcome = "created (active)" if activate else "created"
                except DuplicateError:
                    logger.info(f"Config for '{task_name}' already exists, skipping")
                    outcome = "skipped"
            rows.append((task_name, payload.model_name, outcome))
    finally:
        await db_manager.close()
    return rows


@click.command()
@click.option("--activate", is_flag=True, help="Make each seeded config the active one for its task")
def main(activate: bool):
    """Seed stored AI configs from the built-in defaults."""
    setup_logging()
    rows = asyncio.run(seed(activate))

    table = Table(title="AI task configs")
    table.add_column("Task", style="cyan")
    table.add_column("Model")
    table.add_column("Result")
    for task_name, model_name, outcome in rows:
        table.add_row(task_name, model_name, outcome, style="dim" if outcome == "skipped" else None)
    console.print(table)


if __name__ == "__main__":
    main()
