"""
DFT Governor Package

Token-weighted governance ledger. Core imports are lazily loaded so that
`import dftgov` stays cheap; for direct access, import from submodules:

    from dftgov.governance import GovernorLedger, ProposalInfo
    from dftgov.exceptions import GovernorError
"""

__version__ = "0.1.0"


def __getattr__(name):
    """Lazy attribute loading."""
    if name == 'GovernorLedger':
        from .governance import GovernorLedger
        return GovernorLedger
    elif name == 'GovernorError':
        from .exceptions import GovernorError
        return GovernorError
    raise AttributeError(f"module 'dftgov' has no attribute {name!r}")

__all__ = ['GovernorLedger', 'GovernorError', '__version__']
