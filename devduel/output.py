"""Rich console output and markdown file save for duel results."""

import logging
import re
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from devduel.models import BattleCommentary, DuelResult, FighterRecord, FighterSlot

logger = logging.getLogger(__name__)

console = Console(legacy_windows=False)

_STAT_LABELS = [
    ("technical", "Technical"),
    ("strategy", "Strategy"),
    ("execution", "Execution"),
    ("leadership", "Leadership"),
    ("impact", "Impact"),
    ("experience", "Experience"),
]


def _slug(text: str, max_len: int = 40) -> str:
    """Convert text to a filename-safe slug."""
    slug = re.sub(r"[^\w\s-]", "", text.lower())
    slug = re.sub(r"[\s_-]+", "-", slug).strip("-")
    return slug[:max_len]


def _stat_bar(value: int, width: int = 20) -> str:
    filled = round(value / 100 * width)
    return "█" * filled + "░" * (width - filled)


def _fighter_name(result: DuelResult, slot: FighterSlot) -> str:
    fighter = result.fighter1 if slot == "profile1" else result.fighter2
    return fighter.profile.name if fighter else slot


def print_fighter_card(fighter: FighterRecord, border_style: str = "cyan") -> None:
    """Print one fighter's stats, archetype and techniques as a panel."""
    table = Table.grid(padding=(0, 1))
    table.add_column(style="bold")
    table.add_column()
    table.add_column(justify="right")
    for attr, label in _STAT_LABELS:
        value = getattr(fighter.stats, attr)
        table.add_row(label, _stat_bar(value), str(value))

    profile = fighter.profile
    body = Table.grid()
    body.add_row(Text(profile.title or "Mysterious wanderer", style="italic"))
    body.add_row(Text(f"{fighter.guild} | {fighter.battle_experience}", style="dim"))
    body.add_row("")
    body.add_row(table)
    body.add_row("")
    if fighter.techniques:
        body.add_row(Text("Techniques: " + ", ".join(fighter.techniques)))
    body.add_row(Text(f"Special: {fighter.special_ability}", style="magenta"))

    console.print(
        Panel(
            body,
            title=f"[bold]{profile.name}[/bold] | {fighter.archetype}",
            subtitle=f"Power {fighter.total_power}",
            border_style=border_style,
        )
    )


def print_rounds(commentary: BattleCommentary, result: DuelResult) -> None:
    console.print(Rule("[bold red]Roast Battle[/bold red]"))
    console.print(Text(commentary.introduction, style="bold"))
    for rnd in commentary.rounds:
        attacker = _fighter_name(result, rnd.attacker)
        console.print(
            Panel(
                f"{rnd.roast}\n\n[dim]{rnd.reaction}[/dim]",
                title=f"Round {rnd.round_number}: [bold]{attacker}[/bold] attacks",
                subtitle=f"{rnd.damage} damage",
                border_style="red" if rnd.attacker == "profile1" else "blue",
            )
        )


def print_verdict(result: DuelResult) -> None:
    console.print(Rule("[bold green]Verdict[/bold green]"))
    if result.commentary:
        console.print(result.commentary.verdict)
    if result.winner == "draw":
        console.print("[bold yellow]DRAW![/bold yellow] Nobody leaves with their dignity.")
    else:
        console.print(f"[bold green]{result.winner_name}[/bold green] emerges victorious!")


def print_result(result: DuelResult) -> None:
    """Print both fighter cards, the rounds and the verdict."""
    if result.fighter1:
        print_fighter_card(result.fighter1, border_style="red")
    if result.fighter2:
        print_fighter_card(result.fighter2, border_style="blue")
    if result.commentary:
        print_rounds(result.commentary, result)
    print_verdict(result)


def _fighter_section(fighter: FighterRecord, heading: str) -> list[str]:
    profile = fighter.profile
    lines = [
        f"## {heading}: {profile.name}",
        "",
        f"**Title:** {profile.title}",
        f"**Archetype:** {fighter.archetype}",
        f"**Power:** {fighter.total_power}",
        f"**Guild:** {fighter.guild}",
        f"**Experience:** {fighter.battle_experience}",
        f"**Source:** {profile.source_url} ({profile.source_type})",
        "",
        "| Stat | Value |",
        "|------|-------|",
    ]
    lines += [f"| {label} | {getattr(fighter.stats, attr)} |" for attr, label in _STAT_LABELS]
    lines.append("")
    if fighter.techniques:
        lines.append("**Techniques:** " + ", ".join(fighter.techniques))
    lines.append(f"**Special ability:** {fighter.special_ability}")
    if fighter.missions:
        lines += ["", "**Missions:**", ""]
        lines += [f"- [{m.rank}] {m.name}: {m.description}" for m in fighter.missions]
    if fighter.legendary_scrolls:
        lines += ["", "**Legendary scrolls:** " + ", ".join(fighter.legendary_scrolls)]
    lines.append("")
    return lines


def save_to_file(result: DuelResult, output_dir: Path) -> Path:
    """Save the duel as a markdown report.

    Args:
        result: The completed DuelResult.
        output_dir: Directory to save the file in.

    Returns:
        Path to the saved file.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    name1 = _fighter_name(result, "profile1")
    name2 = _fighter_name(result, "profile2")
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = output_dir / f"{timestamp}_{_slug(name1, 30)}-vs-{_slug(name2, 30)}.md"

    lines: list[str] = [
        f"# DevDuel: {name1} vs {name2}",
        "",
        f"**Date:** {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        f"**Duel:** {result.id}",
        f"**Winner:** {result.winner_name}",
        "",
        "---",
        "",
    ]
    if result.fighter1:
        lines += _fighter_section(result.fighter1, "Fighter 1")
    if result.fighter2:
        lines += _fighter_section(result.fighter2, "Fighter 2")

    if result.commentary:
        lines += ["## Roast Battle", "", result.commentary.introduction, ""]
        for rnd in result.commentary.rounds:
            lines += [
                f"### Round {rnd.round_number}: {_fighter_name(result, rnd.attacker)} ({rnd.damage} damage)",
                "",
                rnd.roast,
                "",
                f"*{rnd.reaction}*",
                "",
            ]
        lines += ["## Verdict", "", result.commentary.verdict, ""]

    filepath.write_text("\n".join(lines), encoding="utf-8")
    logger.info("Duel saved to: %s", filepath)
    return filepath
