"""Command implementations behind the vault-ops CLI."""
