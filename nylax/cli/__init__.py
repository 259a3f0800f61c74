"""NYLAX CLI - command groups built on nylax.sdk."""
