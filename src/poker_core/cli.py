"""CLI entry point for poker-core."""

from __future__ import annotations

import json
import logging
import random

import click

from poker_core.game.errors import ConfigError
from poker_core.game.rules import GameInfo
from poker_core.games.presets import PRESETS, get_preset


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log every dealt hand and action")
def cli(verbose: bool) -> None:
    """Poker Core — rules engine for multi-player poker hands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def _load_game(config: str | None, preset: str | None) -> GameInfo:
    if (config is None) == (preset is None):
        raise click.UsageError("pass exactly one of --config or --preset")
    try:
        return GameInfo.load(config) if config is not None else get_preset(preset)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command()
@click.argument("config", type=click.Path(exists=True, dir_okay=False))
@click.option("--actions", "actions_path", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Action abstraction config to check against the game")
@click.option("--cards", "cards_path", type=click.Path(exists=True, dir_okay=False), default=None,
              help="Card abstraction config to check against the game")
def validate(config: str, actions_path: str | None, cards_path: str | None) -> None:
    """Check a game config (and optional abstraction configs)."""
    from poker_core.abstraction.action_abstraction import ActionAbstraction
    from poker_core.abstraction.card_abstraction import CardAbstraction

    try:
        info = GameInfo.load(config)
        if actions_path is not None:
            ActionAbstraction.from_config(actions_path).validate(info)
        if cards_path is not None:
            cards = CardAbstraction.from_config(cards_path)
            if len(cards.round_infosets) != info.num_rounds:
                raise ConfigError(
                    f"card abstraction has {len(cards.round_infosets)} rounds, expected {info.num_rounds}"
                )
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(
        f"OK: {info.num_players} players, {info.num_rounds} rounds, "
        f"{info.betting_type.value}, {info.deck_size}-card deck"
    )


@cli.command()
@click.argument("name", type=click.Choice(sorted(PRESETS)))
@click.option("--output", "-o", default=None, help="Write JSON to this file instead of stdout")
def preset(name: str, output: str | None) -> None:
    """Print a built-in game config as JSON."""
    info = get_preset(name)
    if output is None:
        click.echo(json.dumps(info.to_dict(), indent=2))
    else:
        info.save(output)
        click.echo(f"Saved {name} to {output}")


@cli.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False), help="Game config JSON")
@click.option("--preset", "-p", "preset_name", default=None, type=click.Choice(sorted(PRESETS)), help="Built-in game")
@click.option("--hands", "-n", default=10, help="Number of hands to play")
@click.option("--seed", "-s", default=None, type=int, help="RNG seed for cards and actions")
def simulate(config: str | None, preset_name: str | None, hands: int, seed: int | None) -> None:
    """Play random legal actions and report each hand's payouts."""
    from poker_core.game.engine import GameEngine, random_policy

    info = _load_game(config, preset_name)
    rng = random.Random(seed)
    engine = GameEngine(info, rng=rng)
    policy = random_policy(rng)

    totals = [0] * info.num_players
    leaked = 0
    for hand_id in range(hands):
        record = engine.play_hand(policy, hand_id=hand_id)
        totals = [t + p for t, p in zip(totals, record.payouts)]
        leaked += record.chip_leak
        click.echo(f"  Hand {hand_id}: {record.state.betting_string():<30} payouts={record.payouts}")

    click.echo(f"\nTotals after {hands} hands: {totals}")
    if leaked:
        click.echo(f"Chips dropped by split remainders: {leaked}")
