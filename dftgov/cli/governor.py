#!/usr/bin/env python3
"""
DFT Governor CLI

Command-line interface over a governor state file (JSON).

Usage:
    dftgov init --as ADDRESS
    dftgov propose --as ADMIN <description> <start> <end>
    dftgov cancel --as ADMIN <proposal_id>
    dftgov set-end --as ADMIN <proposal_id> <timestamp>
    dftgov set-param --as ADMIN <key> <value>
    dftgov set-address --as ADMIN <key> <address>
    dftgov transfer-ownership --as OWNER <address>
    dftgov set-admin --as OWNER <address>
    dftgov join --as ADDRESS
    dftgov exit --as ADDRESS
    dftgov show
    dftgov proposal <proposal_id>
    dftgov member <address>

Voting needs live staking / AMM collaborators and is not exposed here.
"""

import json
from pathlib import Path
from typing import Optional

import click

from dftgov import __version__
from dftgov.config import load_config
from dftgov.constants import DFTGOV_STATE_FILE
from dftgov.exceptions import GovernorError
from dftgov.governance import GovernorLedger, ProposalInfo
from dftgov.logger import LogManager


class CliContext:
    """Shared state for one CLI invocation."""

    def __init__(self, state_path: Path, config_path: Optional[str], now: Optional[int]):
        self.state_path = state_path
        try:
            self.config = load_config(config_path)
        except (GovernorError, ValueError) as e:
            raise click.ClickException(f"Invalid configuration: {e}")
        self.clock = (lambda: now) if now is not None else None
        LogManager().set_level(self.config.logging.level)

    def open(self, create: bool = False) -> GovernorLedger:
        if not self.state_path.exists():
            if create:
                return GovernorLedger(config=self.config, clock=self.clock)
            raise click.ClickException(
                f"State file {self.state_path} not found (run `dftgov init` first)"
            )
        try:
            return GovernorLedger.load(self.state_path, config=self.config, clock=self.clock)
        except GovernorError as e:
            raise click.ClickException(str(e))

    def commit(self, ledger: GovernorLedger) -> None:
        ledger.save(self.state_path)


pass_ctx = click.make_pass_decorator(CliContext)


def run(ctx: CliContext, operation, create: bool = False):
    """Open the ledger, apply ``operation``, save. Governor errors become CLI errors."""
    ledger = ctx.open(create=create)
    try:
        result = operation(ledger)
    except GovernorError as e:
        raise click.ClickException(f"{type(e).__name__}: {e}")
    ctx.commit(ledger)
    return ledger, result


def caller_option(func):
    return click.option(
        "--as", "caller", required=True, metavar="ADDRESS",
        help="Address performing the operation",
    )(func)


@click.group()
@click.version_option(version=__version__, prog_name="dftgov")
@click.option(
    "--state", "-s", "state_path",
    type=click.Path(dir_okay=False),
    default=str(DFTGOV_STATE_FILE),
    show_default=True,
    help="Governor state file",
)
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False),
              default=None, help="config.toml (default: $DFTGOV_CONFIG or ./config.toml)")
@click.option("--now", type=int, default=None, help="Override the current time (unix seconds)")
@click.pass_context
def cli(ctx, state_path: str, config_path: Optional[str], now: Optional[int]):
    """DFT Governor — token-weighted governance ledger."""
    ctx.obj = CliContext(Path(state_path), config_path, now)


# ── Access control ────────────────────────────────────────────────────

@cli.command("init")
@caller_option
@pass_ctx
def init_cmd(ctx: CliContext, caller: str):
    """Create and initialize a new governor state file."""
    if ctx.state_path.exists():
        raise click.ClickException(f"{ctx.state_path} already exists")
    ledger, _ = run(ctx, lambda g: g.initialize(caller), create=True)
    click.echo(click.style("✓ Governor initialized", fg="green"))
    click.echo(f"Owner/admin: {ledger.owner}")
    click.echo(f"Saved to:    {ctx.state_path}")


@cli.command("transfer-ownership")
@caller_option
@click.argument("new_owner")
@pass_ctx
def transfer_ownership_cmd(ctx: CliContext, caller: str, new_owner: str):
    """Hand the owner role to NEW_OWNER."""
    ledger, _ = run(ctx, lambda g: g.transfer_ownership(caller, new_owner))
    click.echo(f"Owner: {ledger.owner}")


@cli.command("set-admin")
@caller_option
@click.argument("new_admin")
@pass_ctx
def set_admin_cmd(ctx: CliContext, caller: str, new_admin: str):
    """Hand the admin role to NEW_ADMIN."""
    ledger, _ = run(ctx, lambda g: g.set_admin(caller, new_admin))
    click.echo(f"Admin: {ledger.admin}")


# ── Parameters & addresses ────────────────────────────────────────────

@cli.command("set-param")
@caller_option
@click.argument("key")
@click.argument("value", type=int)
@pass_ctx
def set_param_cmd(ctx: CliContext, caller: str, key: str, value: int):
    """Set governance parameter KEY (delayAfterDeadline, dftPerVote)."""
    ledger, _ = run(ctx, lambda g: g.set_parameter(caller, key, value))
    click.echo(f"{key} = {ledger.get_parameter(key)}")


@cli.command("set-address")
@caller_option
@click.argument("key")
@click.argument("address")
@pass_ctx
def set_address_cmd(ctx: CliContext, caller: str, key: str, address: str):
    """Set collaborator address KEY (stakingWrapper, ammPair, dftToken)."""
    ledger, _ = run(ctx, lambda g: g.set_address(caller, key, address))
    click.echo(f"{key} = {ledger.get_address(key)}")


# ── Proposals ─────────────────────────────────────────────────────────

@cli.command("propose")
@caller_option
@click.argument("description")
@click.argument("start", type=int)
@click.argument("end", type=int)
@pass_ctx
def propose_cmd(ctx: CliContext, caller: str, description: str, start: int, end: int):
    """Create a proposal voting from START (inclusive) to END (exclusive)."""
    _, proposal_id = run(ctx, lambda g: g.propose(caller, ProposalInfo(description, start, end)))
    click.echo(click.style(f"✓ Proposal #{proposal_id} created", fg="green"))


@cli.command("cancel")
@caller_option
@click.argument("proposal_id", type=int)
@pass_ctx
def cancel_cmd(ctx: CliContext, caller: str, proposal_id: int):
    """Cancel a proposal."""
    run(ctx, lambda g: g.cancel(caller, proposal_id))
    click.echo(f"Proposal #{proposal_id} canceled")


@cli.command("set-end")
@caller_option
@click.argument("proposal_id", type=int)
@click.argument("timestamp", type=int)
@pass_ctx
def set_end_cmd(ctx: CliContext, caller: str, proposal_id: int, timestamp: int):
    """Move a proposal's end timestamp."""
    run(ctx, lambda g: g.change_propose_end_timestamp(caller, proposal_id, timestamp))
    click.echo(f"Proposal #{proposal_id} now ends at {timestamp}")


@cli.command("proposal")
@click.argument("proposal_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print the raw record")
@pass_ctx
def proposal_cmd(ctx: CliContext, proposal_id: int, as_json: bool):
    """Display a proposal and its current state."""
    ledger = ctx.open()
    try:
        proposal = ledger.get_proposal(proposal_id)
        state = ledger.state(proposal_id)
    except GovernorError as e:
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps({**proposal.to_dict(), "state": state.name}, indent=2))
        return
    click.echo(f"Proposal #{proposal.id}: {proposal.description}")
    click.echo(f"  State:    {state.name}")
    click.echo(f"  Proposer: {proposal.proposer}")
    click.echo(f"  Window:   [{proposal.start_timestamp}, {proposal.end_timestamp})")
    click.echo(f"  For:      {proposal.for_votes}")
    click.echo(f"  Against:  {proposal.against_votes}")
    click.echo(f"  Voters:   {proposal.voter_count}")


# ── Membership ────────────────────────────────────────────────────────

@cli.command("join")
@caller_option
@pass_ctx
def join_cmd(ctx: CliContext, caller: str):
    """Join the governor."""
    run(ctx, lambda g: g.join_governor(caller))
    click.echo(f"{caller} joined the governor")


@cli.command("exit")
@caller_option
@pass_ctx
def exit_cmd(ctx: CliContext, caller: str):
    """Leave the governor (fails while vote-locked)."""
    run(ctx, lambda g: g.exit_governor(caller))
    click.echo(f"{caller} left the governor")


@cli.command("member")
@click.argument("address")
@pass_ctx
def member_cmd(ctx: CliContext, address: str):
    """Display membership and lock status for ADDRESS."""
    ledger = ctx.open()
    try:
        member = ledger.get_member(address)
        check = ledger.can_exit_governor(address)
    except GovernorError as e:
        raise click.ClickException(str(e))
    click.echo(f"Joined:          {member.joined}")
    click.echo(f"Locked deadline: {member.locked_deadline}")
    click.echo(f"Exit check:      {check}")


# ── Overview ──────────────────────────────────────────────────────────

@cli.command("show")
@pass_ctx
def show_cmd(ctx: CliContext):
    """Summarize the governor state."""
    ledger = ctx.open()
    click.echo(f"Owner:       {ledger.owner}")
    click.echo(f"Admin:       {ledger.admin}")
    click.echo(f"Proposals:   {ledger.proposal_count}")
    for key, value in ledger.to_dict()["parameters"].items():
        click.echo(f"  {key}: {value}")
    for key, value in ledger.to_dict()["addresses"].items():
        click.echo(f"  {key}: {value}")
    for pid in range(1, ledger.proposal_count + 1):
        click.echo(f"  #{pid} {ledger.state(pid).name}")
    click.echo(f"State root:  {ledger.compute_state_root()}")


if __name__ == "__main__":
    cli()
