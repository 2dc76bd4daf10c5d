"""Core functionality for Hue control.

This package contains:
- discovery: mDNS bridge discovery (DiscoveryController)
- session: BridgeSession for authenticated API requests
- inventory: Cached light roster
- light_commands: Index-addressed light state commands
- config: Credential and trust policy configuration
- errors: Error types
"""
